"""Verify basic package import works."""


def test_import_relkit():
    import relkit
    assert relkit.__version__ == "0.1.0"


def test_import_cli():
    from relkit.cli import main
    assert main is not None
