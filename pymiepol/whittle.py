# -*- coding: utf-8 -*-
"""
Whittle-Matern continuous random medium

angular scattering of a medium whose refractive index fluctuations follow
the Whittle-Matern spectral density (correlation length l_c, shape exponent
D), in the first Born approximation:

    Phi(theta) = 1 / (1 + 4 (k l_c)^2 sin^2(theta / 2))^(D / 2)

    S11 = (1 + cos^2 theta) Phi
    S12 = (cos^2 theta - 1) Phi
    S33 = 2 cos theta Phi
    S43 = 0
"""
import math
import warnings

import torch

from pymiepol import helper
from pymiepol.mie import NANGLES
from pymiepol.exceptions import ParameterOutOfRangeError


def spectral_density(sin2_half_theta, klc, D):
    """Whittle-Matern spectral density at sin^2(theta/2) for k l_c and exponent D"""
    return 1.0 / (1.0 + 4.0 * klc**2 * sin2_half_theta) ** (D / 2.0)


def whittle_matern(
    l_c, D, wavelength, mu=None, legacy_angles=False, precision="double", **kwargs
) -> dict:
    """Mueller matrix table of a Whittle-Matern random medium

    Results are returned as a dictionary with keys:
    'smatrix' : Mueller elements (S11, S12, S33, S43), shape (n_angles, 4)
    'g' : asymmetry parameter (trapezoidal rule over `mu`)
    'phi' : spectral density at each angle
    'theta' : scattering angles used for the Mueller elements

    Args:
        l_c (float): correlation length, same unit as `wavelength`
        D (float): shape exponent of the spectral density
        wavelength (float): wavelength in the medium
        mu (torch.Tensor, optional): cosines of the scattering angles.
        legacy_angles (bool, optional): if True, evaluate entry i at
            theta_i = i pi / n_angles independent of `mu` (the parametrisation
            of older tables). `mu` is then only used for `g`. Defaults to False.
        precision (str, optional): dtype of 'smatrix'. Defaults to "double".
        kwargs: other kwargs are ignored

    Raises:
        ParameterOutOfRangeError: non-positive `l_c` or `wavelength`

    Returns:
        dict: scattering table and asymmetry parameter
    """
    if not l_c > 0 or not wavelength > 0:
        raise ParameterOutOfRangeError("correlation length and wavelength must be positive")
    mu = helper.as_cosine_grid(mu, NANGLES)
    klc = 2.0 * math.pi * l_c / wavelength

    if legacy_angles:
        warnings.warn(
            "legacy Whittle-Matern angles: entry i is evaluated at theta = i*pi/n_angles, "
            "the cosine grid `mu` is only used for the asymmetry parameter."
        )
        n_angles = mu.shape[0]
        theta = torch.arange(n_angles, dtype=torch.float64, device=mu.device) * math.pi / n_angles
        cos_t = torch.cos(theta)
        sin2_half = torch.sin(theta / 2.0) ** 2
    else:
        cos_t = mu
        theta = torch.acos(mu)
        sin2_half = (1.0 - mu) / 2.0

    phi = spectral_density(sin2_half, klc, D)

    smatrix = torch.stack(
        (
            (1.0 + cos_t**2) * phi,
            (cos_t**2 - 1.0) * phi,
            2.0 * cos_t * phi,
            torch.zeros_like(phi),
        ),
        dim=-1,
    )

    return dict(
        smatrix=smatrix.to(dtype=helper.get_float_dtype(precision)),
        g=helper.asymmetry_from_s11(mu, smatrix[:, 0]),
        phi=phi,
        theta=theta,
    )
