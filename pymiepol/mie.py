# -*- coding: utf-8 -*-
"""
Mueller matrix table, scattering efficiency and asymmetry parameter of a
homogeneous sphere

Lorenz-Mie series following

Bohren, Craig F., and Donald R. Huffman.
Absorption and scattering of light by small particles. John Wiley & Sons, 2008.

Wiscombe, W. J.
"Improved Mie scattering algorithms."
Appl. Opt. 19.9, 1505-1509 (1980)

sign convention of the refractive index: Im(m) >= 0 is absorbing. The series
is evaluated in the xi_n = psi_n + i chi_n convention, where absorption is
negative imaginary, so public functions pass conj(m) to the private kernels.

angular vectorization convention:
 - the order loop runs in python, all angles are processed at once
 - the returned `smatrix` has shape (n_angles, 4): S11, S12, S33, S43
"""
import torch

from pymiepol import special
from pymiepol import helper
from pymiepol.exceptions import ParameterOutOfRangeError


NANGLES = 1000  # default number of tabulated angles
X_MAX = 20000.0  # largest validated size parameter
SMALL_X = 0.1  # below: small particle expansion


def _check_size_parameter(x):
    if not x > 0.0:
        raise ParameterOutOfRangeError("sphere size must be positive")
    if x > X_MAX:
        raise ParameterOutOfRangeError("spheres with x>20000 are not validated")


def _check_refractive_index(m):
    if m.real < 0.0 or m.imag < 0.0:
        raise ParameterOutOfRangeError(
            "relative refractive index must have non-negative real and "
            "imaginary parts, got {}".format(m)
        )


def _use_small_particle(x, m):
    return (m.real == 0.0 and x < SMALL_X) or (m.real > 0.0 and abs(m) * x < SMALL_X)


# - private kernels, `m` in the negative-imaginary convention
def _mie_coefficients(x, m, n_stop, device=None, **kwargs):
    """a_n, b_n for n = 1..n_stop, branch by kind of refractive index"""
    n = torch.arange(1, n_stop + 1, dtype=torch.float64, device=device)

    psi, xi = special.riccati_bessel_psi_xi(x, n_stop, device=device)
    psi0, psi1 = psi[:-1], psi[1:]
    xi0, xi1 = xi[:-1], xi[1:]

    if m.real == 0.0:
        # perfectly conducting sphere
        a_n = (n * psi1 / x - psi0) / (n / x * xi1 - xi0)
        b_n = psi1 / xi1
        return a_n, b_n

    dn = special.log_derivative(m, x, n_stop, device=device, **kwargs)[1:]

    if m.imag == 0.0:
        # real index: keep z1 real, the complex form loses digits here
        z1 = dn.real / m.real + n / x
        a_n = (z1 * psi1 - psi0) / (z1 * xi1 - xi0)

        z1 = dn.real * m.real + n / x
        b_n = (z1 * psi1 - psi0) / (z1 * xi1 - xi0)
    else:
        z1 = dn / m + n / x
        a_n = torch.complex(z1.real * psi1 - psi0, z1.imag * psi1) / (z1 * xi1 - xi0)

        z1 = dn * m + n / x
        b_n = torch.complex(z1.real * psi1 - psi0, z1.imag * psi1) / (z1 * xi1 - xi0)

    return a_n, b_n


def _mie(x, m, mu, **kwargs):
    if _use_small_particle(x, m):
        return _small_mie(x, m, mu)

    n_stop = helper.get_truncation_wiscombe(x)
    a_n, b_n = _mie_coefficients(x, m, n_stop, device=mu.device, **kwargs)
    n = torch.arange(1, n_stop + 1, dtype=torch.float64, device=mu.device)

    # - efficiencies and asymmetry parameter
    factor = 2.0 * n + 1.0
    q_sca = torch.sum(factor * (a_n.abs() ** 2 + b_n.abs() ** 2))
    q_ext = torch.sum(factor * (a_n.real + b_n.real))

    # previous order coefficients, a_0 = b_0 = 0
    a_nm1 = torch.cat((torch.zeros_like(a_n[:1]), a_n[:-1]))
    b_nm1 = torch.cat((torch.zeros_like(b_n[:1]), b_n[:-1]))
    g = torch.sum(
        (n - 1.0 / n)
        * (
            a_nm1.real * a_n.real
            + a_nm1.imag * a_n.imag
            + b_nm1.real * b_n.real
            + b_nm1.imag * b_n.imag
        )
    )
    g = g + torch.sum(factor / n / (n + 1.0) * (a_n.real * b_n.real + a_n.imag * b_n.imag))

    q_sca = q_sca * 2.0 / (x * x)
    q_ext = q_ext * 2.0 / (x * x)
    g = g * 4.0 / q_sca / (x * x)

    # - scattering amplitudes, angular functions by upward recurrence
    s1 = torch.zeros(mu.shape, dtype=torch.complex128, device=mu.device)
    s2 = torch.zeros_like(s1)
    pi0 = torch.zeros_like(mu)
    pi1 = torch.ones_like(mu)

    for _n, an, bn in zip(range(1, n_stop + 1), a_n.tolist(), b_n.tolist()):
        f_n = (2.0 * _n + 1.0) / (_n * (_n + 1.0))
        tau = _n * mu * pi1 - (_n + 1.0) * pi0
        alpha = f_n * pi1
        beta = f_n * tau
        s1 += alpha * an + beta * bn
        s2 += alpha * bn + beta * an

        pi0, pi1 = pi1, ((2.0 * _n + 1.0) * mu * pi1 - (_n + 1.0) * pi0) / _n

    return dict(
        smatrix=helper.mueller_elements(s1, s2),
        s1=s1,
        s2=s2,
        q_sca=float(q_sca),
        q_ext=float(q_ext),
        q_abs=float(q_ext - q_sca),
        g=float(g),
        n_max=n_stop,
    )


def _small_mie(x, m, mu):
    m2 = m * m
    m4 = m2 * m2
    x2 = x * x
    x3 = x2 * x
    x4 = x2 * x2
    z0 = complex(-m2.imag, m2.real - 1.0)

    # - a_1
    if m.real == 0.0:
        z3 = complex(0.0, 2.0 / 3.0 * (1.0 - 0.2 * x2))
        d = complex(1.0 - 0.5 * x2, 2.0 / 3.0 * x3)
    else:
        z1 = 2.0 / 3.0 * z0
        z2 = complex(
            1.0 - 0.1 * x2 + (4.0 * m2.real + 5.0) * x4 / 1400.0,
            4.0 * x4 * m2.imag / 1400.0,
        )
        z3 = z1 * z2

        z4 = x3 * (1.0 - 0.1 * x2) * z1
        d = complex(
            2.0
            + m2.real
            + (1.0 - 0.7 * m2.real) * x2
            + (8.0 * m4.real - 385.0 * m2.real + 350.0) / 1400.0 * x4
            + z4.real,
            (-0.7 * m2.imag) * x2
            + (8.0 * m4.imag - 385.0 * m2.imag) / 1400.0 * x4
            + z4.imag,
        )
    ahat1 = z3 / d

    # - b_1
    if m.real == 0.0:
        bhat1 = complex(0.0, -(1.0 - 0.1 * x2) / 3.0) / complex(1.0 + 0.5 * x2, -x3 / 3.0)
    else:
        z2 = x2 / 45.0 * z0
        z6 = complex(1.0 + (2.0 * m2.real - 5.0) * x2 / 70.0, m2.imag * x2 / 35.0)
        z7 = complex(1.0 - (2.0 * m2.real - 5.0) * x2 / 30.0, -m2.imag * x2 / 15.0)
        bhat1 = z2 * (z6 / z7)

    # - a_2
    if m.real == 0.0:
        ahat2 = complex(0.0, x2 / 30.0)
    else:
        z3 = (1.0 - x2 / 14.0) * x2 / 15.0 * z0
        z8 = complex(
            2.0 * m2.real + 3.0 - (m2.real / 7.0 - 0.5) * x2,
            2.0 * m2.imag - m2.imag / 7.0 * x2,
        )
        ahat2 = z3 / z8

    t = abs(ahat1) ** 2 + abs(bhat1) ** 2 + 5.0 / 3.0 * abs(ahat2) ** 2
    q_sca = 6.0 * x4 * t
    g = (
        ahat1.real * (ahat2.real + bhat1.real) + ahat1.imag * (ahat2.imag + bhat1.imag)
    ) / t
    if m.real == 0.0:
        q_ext = q_sca
    else:
        q_ext = 6.0 * x * (ahat1 + bhat1 + 5.0 / 3.0 * ahat2).real

    # - amplitudes: a_1, b_1 weigh pi_1, tau_1; a_2 weighs pi_2 = 3 mu, tau_2 = 3 cos(2 theta)
    x3 *= 1.5
    ahat1 *= x3
    bhat1 *= x3
    ahat2 *= x3 * 5.0 / 3.0

    cos_2theta = 2.0 * mu * mu - 1.0
    s1 = ahat1 + (bhat1 + ahat2) * mu
    s2 = bhat1 + ahat1 * mu + ahat2 * cos_2theta
    s1 = s1.to(dtype=torch.complex128)
    s2 = s2.to(dtype=torch.complex128)

    return dict(
        smatrix=helper.mueller_elements(s1, s2),
        s1=s1,
        s2=s2,
        q_sca=float(q_sca),
        q_ext=float(q_ext),
        q_abs=float(q_ext - q_sca),
        g=float(g),
        n_max=2,
    )


# - public API
def mie(x, m, mu=None, precision="double", **kwargs) -> dict:
    """Mueller matrix table of a homogeneous sphere (Lorenz-Mie series)

    Spheres with |m| x < 0.1 (perfect conductor: x < 0.1) are delegated to
    :func:`small_mie`.

    Results are returned as a dictionary with keys:
    'smatrix' : Mueller elements (S11, S12, S33, S43), shape (n_angles, 4)
    'q_sca' : scattering efficiency
    'q_ext' : extinction efficiency
    'q_abs' : absorption efficiency
    'g' : asymmetry parameter
    's1' : complex amplitude S1 at each angle
    's2' : complex amplitude S2 at each angle
    'n_max' : number of series terms used
    'x' : size parameter
    'm' : relative refractive index

    Args:
        x (float): size parameter 2 pi a n_med / lambda, 0 < x <= 20000
        m (complex): relative refractive index, Im(m) >= 0 absorbs.
            Re(m) = 0 designates a perfectly conducting sphere.
        mu (torch.Tensor, optional): cosines of the scattering angles. Defaults
            to :func:`pymiepol.helper.angle_grid` with `NANGLES` angles.
        precision (str, optional): dtype of 'smatrix', "single" or "double".
            Internal arithmetic is always double. Defaults to "double".
        kwargs: passed to the downward recurrence (`max_iter`, `tol`)

    Raises:
        ParameterOutOfRangeError: x <= 0, x > 20000, invalid `m` or `mu`

    Returns:
        dict: scattering table and scalars
    """
    x = float(x)
    m = complex(m)
    _check_size_parameter(x)
    _check_refractive_index(m)
    mu = helper.as_cosine_grid(mu, NANGLES)

    res = _mie(x, m.conjugate(), mu, **kwargs)
    res["smatrix"] = res["smatrix"].to(dtype=helper.get_float_dtype(precision))
    res["x"] = x
    res["m"] = m
    return res


def small_mie(x, m, mu=None, precision="double", **kwargs) -> dict:
    """Mueller matrix table of a small sphere (Rayleigh limit expansion)

    closed-form expansion of the three leading coefficients a_1, b_1, a_2
    (Wiscombe 1980, Bohren & Huffman ch. 5), separate forms for perfect
    conductors (Re(m) = 0) and dielectrics.

    Returns the same keys as :func:`mie`, with 'n_max' = 2.

    Args:
        x (float): size parameter, 0 < x <= 20000 (accurate for |m| x < 0.1)
        m (complex): relative refractive index, Im(m) >= 0 absorbs.
        mu (torch.Tensor, optional): cosines of the scattering angles.
        precision (str, optional): dtype of 'smatrix'. Defaults to "double".
        kwargs: other kwargs are ignored

    Raises:
        ParameterOutOfRangeError: x <= 0, x > 20000, invalid `m` or `mu`

    Returns:
        dict: scattering table and scalars
    """
    x = float(x)
    m = complex(m)
    _check_size_parameter(x)
    _check_refractive_index(m)
    mu = helper.as_cosine_grid(mu, NANGLES)

    res = _small_mie(x, m.conjugate(), mu)
    res["smatrix"] = res["smatrix"].to(dtype=helper.get_float_dtype(precision))
    res["x"] = x
    res["m"] = m
    return res
