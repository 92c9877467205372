"""Basic import tests to verify package structure."""


def test_import_schelling():
    """Verify main package imports."""
    import schelling
    assert schelling.__version__ == "0.1.0"


def test_import_core():
    """Verify core module structure exists."""
    from schelling import core
    assert hasattr(core, "SegregationEngine")


def test_import_analysis():
    """Verify analysis module structure exists."""
    from schelling import analysis
    assert hasattr(analysis, "__doc__")


def test_import_viz():
    """Verify viz module structure exists."""
    from schelling import viz
    assert hasattr(viz, "plot_grid")
