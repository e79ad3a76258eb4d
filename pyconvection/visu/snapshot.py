"""
Matplotlib snapshot of the convective state.

Author: B.G.
"""

import matplotlib.pyplot as plt
import numpy as np


def plot_convective_state(height, isconvecting, ax = None, cmap = 'viridis', title = None):
	"""
	Draw the height field with the convecting cells outlined.

	Args:
		height (np.ndarray): (ny, nx) height
		isconvecting (np.ndarray): (ny, nx) boolean flags
		ax (matplotlib.axes.Axes, optional): axes to draw on. Default: new figure
		cmap (str, optional): colormap of the height. Default: 'viridis'
		title (str, optional): axes title

	Returns:
		matplotlib.figure.Figure: figure holding the axes

	Author: B.G.
	"""
	height = np.asarray(height)
	flags = np.asarray(isconvecting, dtype = bool)

	if ax is None:
		fig, ax = plt.subplots()
	else:
		fig = ax.figure

	im = ax.imshow(height, cmap = cmap, origin = 'lower')
	fig.colorbar(im, ax = ax, label = 'h')
	if flags.any():
		ax.contour(flags.astype(float), levels = [0.5], colors = 'r', linewidths = 0.8, origin = 'lower')
	if title is not None:
		ax.set_title(title)
	return fig
