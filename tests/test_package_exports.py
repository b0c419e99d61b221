"""
Tests for the package's public surface.
"""

import attribution_sim


def test_public_names_importable():
    for name in attribution_sim.__all__:
        assert hasattr(attribution_sim, name), name


def test_version():
    assert attribution_sim.__version__ == "0.1.0"
