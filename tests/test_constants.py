import jsp_format.constants as constants


def test_constants_module_holds_only_plain_values():
    public = {name: value for name, value in vars(constants).items() if name.isupper()}

    assert "DEFAULT_OPTIONS" not in public
    for value in public.values():
        assert isinstance(value, (int, str, tuple, frozenset, dict))


def test_void_elements_are_lowercase():
    assert all(name == name.lower() for name in constants.VOID_ELEMENTS)


def test_single_tag_and_block_scoped_names_are_disjoint():
    assert constants.SINGLE_TAG_NAMES.isdisjoint(constants.BLOCK_SCOPED_NAMES)
    assert "c:out" in constants.SINGLE_TAG_NAMES
    assert "c:forEach" in constants.BLOCK_SCOPED_NAMES
