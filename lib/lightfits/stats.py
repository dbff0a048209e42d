"""
Statistics used to display FITS data: display limits for images (zscale)
and summary statistics for images and table columns.
"""

import logging

import numpy as np


__all__ = ['ZScale', 'get_stats']


log = logging.getLogger(__name__)


def _finite_view(data):
    values = np.asarray(data, dtype=np.float64).ravel()
    return values[np.isfinite(values)]


class ZScale(object):
    """
    The IRAF zscale algorithm: display limits around the median of the data
    from a line fit to a sorted sample of the pixel values.

    Parameters
    ----------
    krej : float
        Rejection threshold, in standard deviations of the fit residuals.

    contrast : float
        Scaling of the fitted slope; smaller values widen the limits.

    n_samples : int
        Maximum number of pixels sampled.

    max_reject : float
        Maximum fraction of the sample that may be rejected.

    min_npixels : int
        Minimum number of pixels that must survive rejection.

    max_iterations : int
        Maximum number of fit and reject iterations.
    """

    def __init__(self, krej=2.5, contrast=0.25, n_samples=1000,
                 max_reject=0.5, min_npixels=5, max_iterations=5):
        self.krej = krej
        self.contrast = contrast
        self.n_samples = n_samples
        self.max_reject = max_reject
        self.min_npixels = min_npixels
        self.max_iterations = max_iterations

    def get_limits(self, values):
        """
        Returns the ``(vmin, vmax)`` display limits of ``values``; ``(0, 0)``
        when there are no finite values.
        """

        finite = _finite_view(values)
        stride = max(1, len(finite) // self.n_samples)
        samples = np.sort(finite[::stride][:self.n_samples])

        npix = len(samples)
        if npix == 0:
            return (0, 0)

        vmin = samples[0]
        vmax = samples[-1]

        minpix = max(self.min_npixels, int(npix * self.max_reject))
        x = np.arange(npix)
        ngrow = max(1, int(0.01 * npix))

        ngoodpix = npix
        last_ngoodpix = npix + 1
        badpix = np.zeros(npix, dtype=bool)
        fit = (0.0, 0.0)

        for iteration in range(self.max_iterations):
            if ngoodpix >= last_ngoodpix or ngoodpix < minpix:
                break

            fit = _linefit(x, samples, badpix)
            flat = samples - (fit[0] * x + fit[1])
            threshold = self.krej * flat[~badpix].std()
            badpix = (flat < -threshold) | (flat > threshold)

            # grow each rejected pixel over the following ngrow - 1 pixels
            grown = badpix.copy()
            for shift in range(1, ngrow):
                grown[shift:] |= badpix[:-shift]
            badpix = grown

            last_ngoodpix = ngoodpix
            ngoodpix = int(np.count_nonzero(~badpix))

        if ngoodpix >= minpix:
            slope = fit[0]
            if self.contrast > 0:
                slope = slope / self.contrast
            center = (npix - 1) // 2
            median = samples[center]
            imin = median - (center - 1) * slope
            imax = median + (npix - center) * slope
            if abs(slope) < 1e-6 or abs(imin - imax) < 1e-6:
                return (float(vmin), float(vmax))
            vmin = max(vmin, imin)
            vmax = min(vmax, imax)

        log.debug('zscale limits from %d samples: %g, %g', npix, vmin, vmax)
        return (float(vmin), float(vmax))


def _linefit(x, y, badpix):
    """Least squares ``(slope, intercept)`` of the good pixels."""

    good = ~badpix
    x = x[good].astype(np.float64)
    y = y[good]
    count = len(x)
    sumx = x.sum()
    sumy = y.sum()
    sumxy = (x * y).sum()
    sumxx = (x * x).sum()

    delta = count * sumxx - sumx * sumx
    if delta == 0:
        return (0.0, 0.0)
    slope = (count * sumxy - sumx * sumy) / delta
    intercept = (sumxx * sumy - sumx * sumxy) / delta
    return (slope, intercept)


def _to_float(value):
    try:
        return float(value)
    except (TypeError, ValueError):
        return np.nan


def _summary(values):
    finite = _finite_view(values)
    if not finite.size:
        return (np.nan, np.nan, np.nan, np.nan)
    return (float(finite.min()), float(finite.max()), float(finite.mean()),
            float(finite.std()))


def get_stats(data, keys=()):
    """
    Summary statistics of image data or of table columns.

    Parameters
    ----------
    data : array or list of dict
        Image data, or table rows.

    keys : sequence of str, optional
        Table column names.  When empty, ``data`` is treated as an image.

    Returns
    -------
    stats : dict
        ``{'keys': [...], 'data': [[label, value, ...], ...]}`` with one row
        each for the minimum, maximum, mean and standard deviation, and one
        value per column (or one for the image).  Non-finite and non-numeric
        values are ignored.
    """

    if data is None or len(data) == 0:
        return {'keys': [], 'data': []}

    if not keys:
        columns = [_summary(data)]
        new_keys = ['', 'Image Data']
    else:
        columns = []
        for key in keys:
            values = [_to_float(row.get(key)) for row in data]
            columns.append(_summary(values))
        new_keys = [''] + list(keys)

    labels = ['Min', 'Max', 'Mean', 'Std Dev']
    rows = [[label] + [column[idx] for column in columns]
            for idx, label in enumerate(labels)]
    return {'keys': new_keys, 'data': rows}
