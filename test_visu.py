"""Tests for the matplotlib snapshot."""

import matplotlib.pyplot as plt
import numpy as np

from pyconvection.visu import plot_convective_state


class TestPlotConvectiveState:
    def test_new_figure(self):
        h = np.random.default_rng(0).random((12, 16))
        flags = np.zeros((12, 16), dtype=bool)
        flags[4:7, 5:9] = True
        fig = plot_convective_state(h, flags, title="t = 0")
        assert fig.axes[0].get_title() == "t = 0"
        plt.close(fig)

    def test_existing_axes_without_convection(self):
        fig, ax = plt.subplots()
        out = plot_convective_state(np.ones((5, 5)), np.zeros((5, 5)), ax=ax)
        assert out is fig
        plt.close(fig)
