# planet_generator/noise.py

"""
================================================================================
NOISE GENERATION UTILITIES
================================================================================
This module provides 2D, 3D and 4D simplex noise kernels and the fractal and
ridged accumulators built on them. It is designed to be a pure, stateless
utility: every function receives the permutation table it hashes through.

Data Contract:
---------------
- Inputs:
    - perm: A 512-entry permutation table (see prng.build_permutation_table).
    - x, y, z, w: Scalar coordinates.
    - octaves, persistence, lacunarity, frequency: Standard fractal parameters.
- Outputs:
    - simplex_noise_*: floats nominally in [-1, 1].
    - fractal_noise_3d: floats in [-1, 1] (divided by the amplitude sum).
    - ridged_fractal_noise_3d: floats in [0, 1].
- Side Effects: None.
- Invariants: Terms are summed in a fixed order and fastmath is never
  enabled, so results are bit-identical across runs.
================================================================================
"""

import math

import numpy as np
from numba import njit

# Skew/unskew factors.
F2 = 0.5 * (math.sqrt(3.0) - 1.0)
G2 = (3.0 - math.sqrt(3.0)) / 6.0
F3 = 1.0 / 3.0
G3 = 1.0 / 6.0
F4 = (math.sqrt(5.0) - 1.0) / 4.0
G4 = (5.0 - math.sqrt(5.0)) / 20.0

# Squared radius of each corner's contribution and the final scale.
# 3D and 4D use 0.6 rather than 0.5, with the matching scales of 32 and 27,
# as in the simplex-noise.js reference; golden values depend on these.
FALLOFF_2D = 0.5
FALLOFF_3D = 0.6
FALLOFF_4D = 0.6
NORMALIZATION_2D = 70.0
NORMALIZATION_3D = 32.0
NORMALIZATION_4D = 27.0

# 12 cube-edge gradients, shared by the 2D and 3D kernels.
GRAD3 = np.array([
    [1, 1, 0], [-1, 1, 0], [1, -1, 0], [-1, -1, 0],
    [1, 0, 1], [-1, 0, 1], [1, 0, -1], [-1, 0, -1],
    [0, 1, 1], [0, -1, 1], [0, 1, -1], [0, -1, -1],
], dtype=np.float64)

# 2D gradients: the first two components of 12 directions.
GRAD2 = np.array([
    [1, 1], [-1, 1], [1, -1], [-1, -1],
    [1, 0], [-1, 0], [1, 0], [-1, 0],
    [0, 1], [0, -1], [0, 1], [0, -1],
], dtype=np.float64)

# 32 tesseract-edge gradients.
GRAD4 = np.array([
    [0, 1, 1, 1], [0, 1, 1, -1], [0, 1, -1, 1], [0, 1, -1, -1],
    [0, -1, 1, 1], [0, -1, 1, -1], [0, -1, -1, 1], [0, -1, -1, -1],
    [1, 0, 1, 1], [1, 0, 1, -1], [1, 0, -1, 1], [1, 0, -1, -1],
    [-1, 0, 1, 1], [-1, 0, 1, -1], [-1, 0, -1, 1], [-1, 0, -1, -1],
    [1, 1, 0, 1], [1, 1, 0, -1], [1, -1, 0, 1], [1, -1, 0, -1],
    [-1, 1, 0, 1], [-1, 1, 0, -1], [-1, -1, 0, 1], [-1, -1, 0, -1],
    [1, 1, 1, 0], [1, 1, -1, 0], [1, -1, 1, 0], [1, -1, -1, 0],
    [-1, 1, 1, 0], [-1, 1, -1, 0], [-1, -1, 1, 0], [-1, -1, -1, 0],
], dtype=np.float64)


@njit
def _dot2(h, x, y):
    g = GRAD2[h % 12]
    return g[0] * x + g[1] * y


@njit
def _dot3(h, x, y, z):
    g = GRAD3[h % 12]
    return g[0] * x + g[1] * y + g[2] * z


@njit
def _dot4(h, x, y, z, w):
    g = GRAD4[h % 32]
    return g[0] * x + g[1] * y + g[2] * z + g[3] * w


@njit
def simplex_noise_2d(perm, x, y):
    """2D simplex noise over a triangular lattice."""
    s = (x + y) * F2
    i = int(np.floor(x + s))
    j = int(np.floor(y + s))
    t = (i + j) * G2
    x0 = x - (i - t)
    y0 = y - (j - t)

    # Lower or upper triangle of the skewed unit square.
    if x0 > y0:
        i1, j1 = 1, 0
    else:
        i1, j1 = 0, 1

    x1 = x0 - i1 + G2
    y1 = y0 - j1 + G2
    x2 = x0 - 1.0 + 2.0 * G2
    y2 = y0 - 1.0 + 2.0 * G2

    ii = i & 255
    jj = j & 255

    n0 = 0.0
    t0 = FALLOFF_2D - x0 * x0 - y0 * y0
    if t0 >= 0.0:
        t0 *= t0
        n0 = t0 * t0 * _dot2(perm[ii + perm[jj]], x0, y0)

    n1 = 0.0
    t1 = FALLOFF_2D - x1 * x1 - y1 * y1
    if t1 >= 0.0:
        t1 *= t1
        n1 = t1 * t1 * _dot2(perm[ii + i1 + perm[jj + j1]], x1, y1)

    n2 = 0.0
    t2 = FALLOFF_2D - x2 * x2 - y2 * y2
    if t2 >= 0.0:
        t2 *= t2
        n2 = t2 * t2 * _dot2(perm[ii + 1 + perm[jj + 1]], x2, y2)

    return NORMALIZATION_2D * (n0 + n1 + n2)


@njit
def simplex_noise_3d(perm, x, y, z):
    """3D simplex noise over a tetrahedral lattice."""
    s = (x + y + z) * F3
    i = int(np.floor(x + s))
    j = int(np.floor(y + s))
    k = int(np.floor(z + s))
    t = (i + j + k) * G3
    x0 = x - (i - t)
    y0 = y - (j - t)
    z0 = z - (k - t)

    # Pick the tetrahedron by ordering the offsets.
    if x0 >= y0:
        if y0 >= z0:
            i1, j1, k1, i2, j2, k2 = 1, 0, 0, 1, 1, 0
        elif x0 >= z0:
            i1, j1, k1, i2, j2, k2 = 1, 0, 0, 1, 0, 1
        else:
            i1, j1, k1, i2, j2, k2 = 0, 0, 1, 1, 0, 1
    else:
        if y0 < z0:
            i1, j1, k1, i2, j2, k2 = 0, 0, 1, 0, 1, 1
        elif x0 < z0:
            i1, j1, k1, i2, j2, k2 = 0, 1, 0, 0, 1, 1
        else:
            i1, j1, k1, i2, j2, k2 = 0, 1, 0, 1, 1, 0

    x1 = x0 - i1 + G3
    y1 = y0 - j1 + G3
    z1 = z0 - k1 + G3
    x2 = x0 - i2 + 2.0 * G3
    y2 = y0 - j2 + 2.0 * G3
    z2 = z0 - k2 + 2.0 * G3
    x3 = x0 - 1.0 + 3.0 * G3
    y3 = y0 - 1.0 + 3.0 * G3
    z3 = z0 - 1.0 + 3.0 * G3

    ii = i & 255
    jj = j & 255
    kk = k & 255

    n0 = 0.0
    t0 = FALLOFF_3D - x0 * x0 - y0 * y0 - z0 * z0
    if t0 >= 0.0:
        t0 *= t0
        n0 = t0 * t0 * _dot3(perm[ii + perm[jj + perm[kk]]], x0, y0, z0)

    n1 = 0.0
    t1 = FALLOFF_3D - x1 * x1 - y1 * y1 - z1 * z1
    if t1 >= 0.0:
        t1 *= t1
        n1 = t1 * t1 * _dot3(perm[ii + i1 + perm[jj + j1 + perm[kk + k1]]], x1, y1, z1)

    n2 = 0.0
    t2 = FALLOFF_3D - x2 * x2 - y2 * y2 - z2 * z2
    if t2 >= 0.0:
        t2 *= t2
        n2 = t2 * t2 * _dot3(perm[ii + i2 + perm[jj + j2 + perm[kk + k2]]], x2, y2, z2)

    n3 = 0.0
    t3 = FALLOFF_3D - x3 * x3 - y3 * y3 - z3 * z3
    if t3 >= 0.0:
        t3 *= t3
        n3 = t3 * t3 * _dot3(perm[ii + 1 + perm[jj + 1 + perm[kk + 1]]], x3, y3, z3)

    return NORMALIZATION_3D * (n0 + n1 + n2 + n3)


@njit
def simplex_noise_4d(perm, x, y, z, w):
    """4D simplex noise. The fourth axis is typically time."""
    s = (x + y + z + w) * F4
    i = int(np.floor(x + s))
    j = int(np.floor(y + s))
    k = int(np.floor(z + s))
    l = int(np.floor(w + s))
    t = (i + j + k + l) * G4
    x0 = x - (i - t)
    y0 = y - (j - t)
    z0 = z - (k - t)
    w0 = w - (l - t)

    # Rank the offsets to find which of the 24 simplices contains the point.
    rank_x = 0
    rank_y = 0
    rank_z = 0
    rank_w = 0
    if x0 > y0:
        rank_x += 1
    else:
        rank_y += 1
    if x0 > z0:
        rank_x += 1
    else:
        rank_z += 1
    if x0 > w0:
        rank_x += 1
    else:
        rank_w += 1
    if y0 > z0:
        rank_y += 1
    else:
        rank_z += 1
    if y0 > w0:
        rank_y += 1
    else:
        rank_w += 1
    if z0 > w0:
        rank_z += 1
    else:
        rank_w += 1

    i1 = 1 if rank_x >= 3 else 0
    j1 = 1 if rank_y >= 3 else 0
    k1 = 1 if rank_z >= 3 else 0
    l1 = 1 if rank_w >= 3 else 0
    i2 = 1 if rank_x >= 2 else 0
    j2 = 1 if rank_y >= 2 else 0
    k2 = 1 if rank_z >= 2 else 0
    l2 = 1 if rank_w >= 2 else 0
    i3 = 1 if rank_x >= 1 else 0
    j3 = 1 if rank_y >= 1 else 0
    k3 = 1 if rank_z >= 1 else 0
    l3 = 1 if rank_w >= 1 else 0

    x1 = x0 - i1 + G4
    y1 = y0 - j1 + G4
    z1 = z0 - k1 + G4
    w1 = w0 - l1 + G4
    x2 = x0 - i2 + 2.0 * G4
    y2 = y0 - j2 + 2.0 * G4
    z2 = z0 - k2 + 2.0 * G4
    w2 = w0 - l2 + 2.0 * G4
    x3 = x0 - i3 + 3.0 * G4
    y3 = y0 - j3 + 3.0 * G4
    z3 = z0 - k3 + 3.0 * G4
    w3 = w0 - l3 + 3.0 * G4
    x4 = x0 - 1.0 + 4.0 * G4
    y4 = y0 - 1.0 + 4.0 * G4
    z4 = z0 - 1.0 + 4.0 * G4
    w4 = w0 - 1.0 + 4.0 * G4

    ii = i & 255
    jj = j & 255
    kk = k & 255
    ll = l & 255

    n0 = 0.0
    t0 = FALLOFF_4D - x0 * x0 - y0 * y0 - z0 * z0 - w0 * w0
    if t0 >= 0.0:
        t0 *= t0
        h = perm[ii + perm[jj + perm[kk + perm[ll]]]]
        n0 = t0 * t0 * _dot4(h, x0, y0, z0, w0)

    n1 = 0.0
    t1 = FALLOFF_4D - x1 * x1 - y1 * y1 - z1 * z1 - w1 * w1
    if t1 >= 0.0:
        t1 *= t1
        h = perm[ii + i1 + perm[jj + j1 + perm[kk + k1 + perm[ll + l1]]]]
        n1 = t1 * t1 * _dot4(h, x1, y1, z1, w1)

    n2 = 0.0
    t2 = FALLOFF_4D - x2 * x2 - y2 * y2 - z2 * z2 - w2 * w2
    if t2 >= 0.0:
        t2 *= t2
        h = perm[ii + i2 + perm[jj + j2 + perm[kk + k2 + perm[ll + l2]]]]
        n2 = t2 * t2 * _dot4(h, x2, y2, z2, w2)

    n3 = 0.0
    t3 = FALLOFF_4D - x3 * x3 - y3 * y3 - z3 * z3 - w3 * w3
    if t3 >= 0.0:
        t3 *= t3
        h = perm[ii + i3 + perm[jj + j3 + perm[kk + k3 + perm[ll + l3]]]]
        n3 = t3 * t3 * _dot4(h, x3, y3, z3, w3)

    n4 = 0.0
    t4 = FALLOFF_4D - x4 * x4 - y4 * y4 - z4 * z4 - w4 * w4
    if t4 >= 0.0:
        t4 *= t4
        h = perm[ii + 1 + perm[jj + 1 + perm[kk + 1 + perm[ll + 1]]]]
        n4 = t4 * t4 * _dot4(h, x4, y4, z4, w4)

    return NORMALIZATION_4D * (n0 + n1 + n2 + n3 + n4)


@njit
def fractal_noise_3d(perm, x, y, z, octaves, persistence, lacunarity, frequency):
    """
    Sums octaves of 3D simplex noise and divides by the total amplitude.
    Returns 0.0 when no amplitude was accumulated.
    """
    total = 0.0
    amplitude = 1.0
    max_amplitude = 0.0
    for _ in range(octaves):
        total += amplitude * simplex_noise_3d(perm, x * frequency, y * frequency, z * frequency)
        max_amplitude += amplitude
        amplitude *= persistence
        frequency *= lacunarity

    if max_amplitude == 0.0:
        return 0.0
    return total / max_amplitude


@njit
def ridged_fractal_noise_3d(perm, x, y, z, octaves, persistence, lacunarity, frequency):
    """
    Same accumulation as fractal_noise_3d but each octave samples
    1 - |noise|. The result is in [0, 1]; 0.5 when no amplitude was
    accumulated.
    """
    total = 0.0
    amplitude = 1.0
    max_amplitude = 0.0
    for _ in range(octaves):
        sample = simplex_noise_3d(perm, x * frequency, y * frequency, z * frequency)
        total += amplitude * (1.0 - abs(sample))
        max_amplitude += amplitude
        amplitude *= persistence
        frequency *= lacunarity

    if max_amplitude == 0.0:
        return 0.5
    return total / max_amplitude
