# renderer/tone_mapping.py
import numpy as np
from numba import njit, prange

TONE_MAPS = ("clamp", "reinhard", "auto")


@njit(parallel=True, cache=True)
def tone_mapping_kernel(linear_image, output_image, exposure, white_point, gamma, reinhard):
    """
    Convert a (height, width, 3) float image to 8-bit in place.

    Per channel: scale by exposure, optional Reinhard curve, clamp to [0, 1],
    gamma encode, then truncate ``c * 255`` to an integer. Rows are
    processed in parallel; each row writes only its own output row.
    """
    height = linear_image.shape[0]
    width = linear_image.shape[1]
    inv_gamma = 1.0 / gamma
    for y in prange(height):
        for x in range(width):
            for c in range(3):
                v = linear_image[y, x, c] * exposure
                if reinhard:
                    v = v / (1.0 + v / white_point)
                if v < 0.0:
                    v = 0.0
                elif v > 1.0:
                    v = 1.0
                if gamma != 1.0:
                    v = v ** inv_gamma
                output_image[y, x, c] = int(v * 255.0)


def auto_exposure(linear_image, target_midgray=0.18, mask=None):
    """
    Exposure that maps the average scene luminance to ``target_midgray``.
    Only pixels where ``mask`` is True are averaged when a mask is given.
    """
    luminance = 0.2126 * linear_image[:, :, 0] + 0.7152 * linear_image[:, :, 1] + 0.0722 * linear_image[:, :, 2]
    if mask is not None:
        luminance = luminance[mask]
    mean = float(luminance.mean()) if luminance.size else 0.0
    avg_lum = mean + 1e-5  # avoid division by zero
    return target_midgray / avg_lum


def tone_map(linear_image, output_image, mode="clamp", exposure=1.0, white_point=1.0, gamma=1.0, mask=None):
    """
    Write ``linear_image`` into the uint8 ``output_image``.

    ``clamp`` reproduces a plain clamp-and-scale, ``reinhard`` applies the
    Reinhard curve, ``auto`` picks the exposure from the mean luminance
    before applying Reinhard; ``mask`` limits which pixels feed that average.
    """
    if mode not in TONE_MAPS:
        raise ValueError(f"Unknown tone map {mode!r}; expected one of {TONE_MAPS}")
    linear = np.ascontiguousarray(linear_image, dtype=np.float64)
    if mode == "auto":
        exposure = auto_exposure(linear, mask=mask)
    tone_mapping_kernel(linear, output_image, float(exposure), float(white_point), float(gamma), mode != "clamp")
    return output_image
