"""Test module for text_resource_xml package initialization."""


def test_package_import() -> None:
    """Test that the package can be imported successfully."""
    # Arrange & Act
    import text_resource_xml

    # Assert
    assert text_resource_xml is not None


def test_package_has_version() -> None:
    """Test that the package has a version attribute."""
    # Arrange & Act
    import text_resource_xml

    # Assert
    assert isinstance(text_resource_xml.__version__, str)
    assert text_resource_xml.__version__ == "0.1.0"


def test_package_has_author() -> None:
    """Test that the package has an author attribute."""
    # Arrange & Act
    import text_resource_xml

    # Assert
    assert text_resource_xml.__author__ == "Text Resource XML Team"


def test_package_all_exports() -> None:
    """Test that every name in __all__ is importable from the package."""
    # Arrange & Act
    import text_resource_xml

    # Assert
    for name in text_resource_xml.__all__:
        assert hasattr(text_resource_xml, name), name
    assert "read" in text_resource_xml.__all__
    assert "write" in text_resource_xml.__all__
    assert "TextResourceXml" in text_resource_xml.__all__
