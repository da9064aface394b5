"""Test module for text_transcoder package initialization."""


def test_package_import() -> None:
    """Test that the package can be imported successfully."""
    # Arrange & Act
    import text_transcoder

    # Assert
    assert text_transcoder is not None


def test_package_has_version() -> None:
    """Test that the package has a version attribute."""
    # Arrange & Act
    import text_transcoder

    # Assert
    assert isinstance(text_transcoder.__version__, str)
    assert text_transcoder.__version__ == "0.1.0"


def test_package_has_author() -> None:
    """Test that the package has an author attribute."""
    # Arrange & Act
    import text_transcoder

    # Assert
    assert text_transcoder.__author__ == "Text Transcoder Team"


def test_package_all_exports() -> None:
    """Test that __all__ contains expected exports."""
    # Arrange & Act
    import text_transcoder

    # Assert
    expected = {
        "transcode",
        "transcode_file",
        "LineTranscoder",
        "TranscodeConfig",
        "BOMDetector",
        "Encoding",
        "TranscodeError",
    }
    assert expected <= set(text_transcoder.__all__)
    for name in text_transcoder.__all__:
        assert hasattr(text_transcoder, name)
