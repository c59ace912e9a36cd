# -*- coding: utf-8 -*-
"""
polydisperse sphere suspensions

Mueller matrix table of spheres with a Gaussian distribution of radii,
averaged over `n_radii` radii sampled uniformly within +/- 3 standard
deviations of the mean radius.
"""
import math

import torch

from pymiepol import helper
from pymiepol.mie import mie, NANGLES
from pymiepol.exceptions import ParameterOutOfRangeError


NRS = 1001  # default number of sampled radii


def gaussian_radii(mean_radius, cv, n_radii=NRS):
    """radii and (unnormalized) Gaussian weights of a size distribution

    r_i = r_mean - 3 sigma + i delta, i = 0..n_radii-1, with sigma = cv r_mean
    and delta = 6 sigma / n_radii.

    Args:
        mean_radius (float): mean sphere radius
        cv (float): coefficient of variation sigma / r_mean, > 0
        n_radii (int, optional): number of samples. Defaults to 1001.

    Returns:
        torch.Tensor, torch.Tensor: radii, weights
    """
    st_dev = float(mean_radius) * float(cv)
    assert st_dev > 0, "Gaussian size distribution needs a positive width"
    delta_size = 6.0 * st_dev / n_radii

    radii = mean_radius - 3.0 * st_dev + delta_size * torch.arange(n_radii, dtype=torch.float64)
    weights = torch.exp(-((radii - mean_radius) ** 2) / (2.0 * st_dev**2)) / math.sqrt(
        2.0 * math.pi * st_dev**2
    )
    return radii, weights


def mie_poly(
    mean_radius,
    cv,
    m,
    n_med,
    wavelength,
    mu=None,
    n_radii=NRS,
    precision="double",
    **kwargs,
) -> dict:
    """Mueller matrix table of a Gaussian polydisperse sphere suspension

    Each sampled radius is evaluated with :func:`pymiepol.mie` and its table
    is added with weight w_i / sum(w). The asymmetry parameter is recomputed
    from the averaged S11 with :func:`pymiepol.helper.asymmetry_from_s11`.
    Efficiencies are averaged by scattering cross section, i.e. weighted by
    w_i r_i^2.

    `mean_radius` and `wavelength` must be given in the same length unit.

    Results are returned as a dictionary with keys:
    'smatrix' : averaged Mueller elements (S11, S12, S33, S43), shape (n_angles, 4)
    'q_sca' : cross section weighted scattering efficiency
    'q_ext' : cross section weighted extinction efficiency
    'q_abs' : cross section weighted absorption efficiency
    'g' : asymmetry parameter of the averaged table
    'radii' : sampled radii
    'weights' : normalized weights of the radii

    Args:
        mean_radius (float): mean sphere radius
        cv (float): coefficient of variation. 0 gives the monodisperse result.
        m (complex): relative refractive index sphere / medium, Im(m) >= 0 absorbs.
        n_med (float): refractive index of the medium
        wavelength (float): vacuum wavelength
        mu (torch.Tensor, optional): cosines of the scattering angles.
        n_radii (int, optional): number of sampled radii. Defaults to 1001.
        precision (str, optional): dtype of 'smatrix'. Defaults to "double".
        kwargs: passed to :func:`pymiepol.mie`

    Raises:
        ParameterOutOfRangeError: negative `cv`, non-positive `mean_radius`,
            `wavelength` or `n_med`, or a sampled radius with invalid size parameter

    Returns:
        dict: averaged scattering table and scalars
    """
    if cv < 0:
        raise ParameterOutOfRangeError("coefficient of variation must not be negative")
    if not wavelength > 0 or not n_med > 0:
        raise ParameterOutOfRangeError("wavelength and medium index must be positive")
    if not mean_radius > 0:
        raise ParameterOutOfRangeError("mean sphere radius must be positive")
    mu = helper.as_cosine_grid(mu, NANGLES)

    # - degenerate distribution: single radius
    if cv == 0:
        x = helper.size_parameter(mean_radius, n_med, wavelength)
        res = mie(x, m, mu, **kwargs)
        return dict(
            smatrix=res["smatrix"].to(dtype=helper.get_float_dtype(precision)),
            q_sca=res["q_sca"],
            q_ext=res["q_ext"],
            q_abs=res["q_abs"],
            g=helper.asymmetry_from_s11(mu, res["smatrix"][:, 0]),
            radii=torch.as_tensor([float(mean_radius)], dtype=torch.float64),
            weights=torch.ones(1, dtype=torch.float64),
        )

    radii, weights = gaussian_radii(mean_radius, cv, n_radii)
    prob = weights / torch.sum(weights)

    smatrix = torch.zeros((mu.shape[0], 4), dtype=torch.float64, device=mu.device)
    q_sca = 0.0
    q_ext = 0.0
    cs_norm = 0.0
    for r_i, p_i in zip(radii.tolist(), prob.tolist()):
        x_i = helper.size_parameter(r_i, n_med, wavelength)
        res = mie(x_i, m, mu, **kwargs)

        smatrix += p_i * res["smatrix"]
        q_sca += p_i * r_i**2 * res["q_sca"]
        q_ext += p_i * r_i**2 * res["q_ext"]
        cs_norm += p_i * r_i**2

    q_sca /= cs_norm
    q_ext /= cs_norm

    return dict(
        smatrix=smatrix.to(dtype=helper.get_float_dtype(precision)),
        q_sca=q_sca,
        q_ext=q_ext,
        q_abs=q_ext - q_sca,
        g=helper.asymmetry_from_s11(mu, smatrix[:, 0]),
        radii=radii,
        weights=prob,
    )
