# -*- coding: utf-8 -*-
"""pymiepol.helper - Utility functions shared by the scattering kernels.

This submodule groups small, self-contained helpers used throughout
:mod:`pymiepol`:

* **Angle grids**
  - :func:`angle_grid` - canonical cosine grid ``mu_k = cos(pi k / (N - 1))``.
  - :func:`as_cosine_grid` - validate / convert a caller supplied grid.
* **Series truncation**
  - :func:`get_truncation_wiscombe` - Wiscombe's ``nstop`` criterion.
* **Tables**
  - :func:`mueller_elements` - (S11, S12, S33, S43) from the amplitudes.
  - :func:`asymmetry_from_s11` - trapezoidal asymmetry parameter of a table.
* **Misc**
  - :func:`size_parameter`, :func:`get_float_dtype`.

All tensors are double precision unless stated otherwise.
"""
import math

import torch

from pymiepol.exceptions import ParameterOutOfRangeError


DTYPE_FLOAT = torch.float64


def get_float_dtype(precision="double"):
    """real torch dtype for a precision keyword ("single" or "double")"""
    if precision.lower() == "single":
        return torch.float32
    elif precision.lower() == "double":
        return torch.float64
    else:
        raise ValueError("precision must be 'single' or 'double', got '{}'".format(precision))


def angle_grid(n_angles, device=None):
    """cosines of `n_angles` scattering angles equally spaced in [0, pi]

    mu_k = cos(pi * k / (n_angles - 1)), i.e. from forward (mu=1) to
    backward (mu=-1) scattering.

    Args:
        n_angles (int): number of sampled angles, at least 2
        device (torch.device, optional): device of the returned tensor

    Returns:
        torch.Tensor: 1D tensor of cosines
    """
    n_angles = int(n_angles)
    assert n_angles >= 2, "angle grid needs at least two angles"
    k = torch.arange(n_angles, dtype=DTYPE_FLOAT, device=device)
    return torch.cos(torch.pi * k / (n_angles - 1))


def as_cosine_grid(mu=None, n_angles=None):
    """canonicalize a cosine grid to a 1D float64 tensor

    Args:
        mu (torch.Tensor or sequence, optional): cosines of the scattering
            angles. If None, :func:`angle_grid` with `n_angles` is used.
        n_angles (int, optional): number of angles of the default grid.

    Raises:
        ParameterOutOfRangeError: `mu` is not 1D or leaves [-1, 1]

    Returns:
        torch.Tensor: cosine grid
    """
    if mu is None:
        return angle_grid(n_angles)

    mu = torch.as_tensor(mu, dtype=DTYPE_FLOAT)
    if mu.ndim != 1 or mu.numel() == 0:
        raise ParameterOutOfRangeError(
            "cosine grid must be a non-empty 1D tensor, got shape {}".format(tuple(mu.shape))
        )
    if torch.any(mu.abs() > 1.0):
        raise ParameterOutOfRangeError("cosines of scattering angles must lie in [-1, 1]")
    return mu


def get_truncation_wiscombe(x):
    # criterion for farfield series truncation for size parameter x
    #
    # Wiscombe, W. J.
    # "Improved Mie scattering algorithms."
    # Appl. Opt. 19.9, 1505-1509 (1980)
    #
    # the 4.05 branch is used for all x, independent of m
    return int(math.floor(x + 4.05 * x ** (1.0 / 3.0) + 2.0))


def size_parameter(radius, n_med, wavelength):
    """size parameter 2 pi a n_med / lambda (radius and wavelength in same unit)"""
    return 2.0 * math.pi * float(radius) * float(n_med) / float(wavelength)


def mueller_elements(s1: torch.Tensor, s2: torch.Tensor) -> torch.Tensor:
    """independent Mueller matrix elements of a sphere from its amplitudes

    columns: S11, S12, S33, S43 with

        S11 = (|S2|^2 + |S1|^2) / 2
        S12 = (|S2|^2 - |S1|^2) / 2
        S33 = Re(conj(S1) S2)
        S43 = Im(conj(S1) S2)

    Args:
        s1 (torch.Tensor): complex amplitude S1 at each angle
        s2 (torch.Tensor): complex amplitude S2 at each angle

    Returns:
        torch.Tensor: real tensor of shape (n_angles, 4)
    """
    s1_sq = s1.abs() ** 2
    s2_sq = s2.abs() ** 2
    s1c_s2 = s1.conj() * s2

    return torch.stack(
        (
            0.5 * s2_sq + 0.5 * s1_sq,
            0.5 * s2_sq - 0.5 * s1_sq,
            s1c_s2.real,
            s1c_s2.imag,
        ),
        dim=-1,
    )


def asymmetry_from_s11(mu: torch.Tensor, s11: torch.Tensor) -> float:
    """asymmetry parameter <cos theta> of a tabulated phase function

    Trapezoidal rule over the caller's grid. The first sample is closed with
    a companion point at mu=1, and the cosine of each interval is taken at
    its right node, as done by the photon transport engine.

    Args:
        mu (torch.Tensor): cosines of the sampled angles
        s11 (torch.Tensor): S11 at each cosine

    Returns:
        float: asymmetry parameter g
    """
    mu = torch.as_tensor(mu, dtype=DTYPE_FLOAT)
    s11 = torch.as_tensor(s11, dtype=DTYPE_FLOAT, device=mu.device)
    assert mu.shape == s11.shape

    d_mu_0 = torch.abs(mu[0] - 1.0)
    num = mu[0] * s11[0] * d_mu_0
    den = s11[0] * d_mu_0

    d_mu = torch.abs(mu[1:] - mu[:-1])
    s11_mid = (s11[1:] + s11[:-1]) / 2.0
    num = num + torch.sum(mu[1:] * s11_mid * d_mu)
    den = den + torch.sum(s11_mid * d_mu)

    return float(num / den)
