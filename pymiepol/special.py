# -*- coding: utf-8 -*-
"""
logarithmic derivative D_n(z) = psi_n'(z) / psi_n(z) of the Riccati-Bessel
function of the first kind, and the Riccati-Bessel functions of real argument

Wiscombe, W. J.
"Improved Mie scattering algorithms."
Appl. Opt. 19.9, 1505-1509 (1980)

Lentz, W. J.
"Generating Bessel functions in Mie scattering calculations using continued fractions."
Appl. Opt. 15.3, 668-671 (1976)

vectorization convention: the order is added as first dimension, all other
dimensions follow the argument `z`.
"""
# %%
import math

import torch

from pymiepol.exceptions import NumericalNonConvergenceError


DTYPE_COMPLEX = torch.complex128

LENTZ_TOL = 1e-12
LENTZ_MAX_ITER = 100000


def _as_complex(z):
    return torch.as_tensor(z, dtype=DTYPE_COMPLEX)


def lentz_dn(z, n: int, tol=LENTZ_TOL, max_iter=LENTZ_MAX_ITER, **kwargs):
    """D_n(z) at a single order n via modified Lentz continued fraction

    Vectorized over all `z`: iteration continues until every entry
    converged, converged entries are frozen.

    Args:
        z (torch.Tensor): complex argument(s), must not be zero
        n (int): order, n >= 1
        tol (float, optional): iteration stops once ||ratio| - 1| < tol. Defaults to 1e-12.
        max_iter (int, optional): iteration bound. Defaults to 100000.
        kwargs: other kwargs are ignored

    Raises:
        NumericalNonConvergenceError: `max_iter` reached

    Returns:
        torch.Tensor: D_n(z), same shape as `z`
    """
    _z = _as_complex(z)
    n = int(n)
    assert n >= 1, "continued fraction requires order n >= 1"

    zinv = 2.0 / _z
    alpha = (n + 0.5) * zinv
    aj = (-n - 1.5) * zinv
    alpha_j1 = aj + 1.0 / alpha
    alpha_j2 = aj
    ratio = alpha_j1 / alpha_j2
    runratio = alpha * ratio

    converged = torch.zeros(_z.shape, dtype=torch.bool, device=_z.device)
    for _ in range(max_iter):
        aj = zinv - aj
        alpha_j1 = 1.0 / alpha_j1 + aj
        alpha_j2 = 1.0 / alpha_j2 + aj
        ratio = alpha_j1 / alpha_j2
        zinv = -zinv

        runratio = torch.where(converged, runratio, runratio * ratio)
        converged = converged | (torch.abs(torch.abs(ratio) - 1.0) < tol)
        if bool(converged.all()):
            break
    else:
        raise NumericalNonConvergenceError(
            "continued fraction failed to converge (n={}, {} iterations)".format(
                n, max_iter
            )
        )

    return -n / _z + runratio


def dn_up(z, n_stop: int, **kwargs):
    """D_k(z) for k = 0..n_stop by upward recurrence

    D_0 = cot(z), D_k = 1 / (k/z - D_{k-1}) - k/z

    Only stable for small |Im(z)|, see :func:`use_upward_recurrence`.

    Args:
        z (torch.Tensor): complex argument(s)
        n_stop (int): highest order
        kwargs: other kwargs are ignored

    Returns:
        torch.Tensor: tensor of shape (n_stop + 1, *z.shape)
    """
    _z = _as_complex(z)
    zinv = 1.0 / _z

    dns = [1.0 / torch.tan(_z)]  # python list for orders to avoid in-place modif.
    for k in range(1, int(n_stop) + 1):
        k_over_z = k * zinv
        dns.append(1.0 / (k_over_z - dns[-1]) - k_over_z)

    return torch.stack(dns, dim=0)


def dn_down(z, n_stop: int, **kwargs):
    """D_k(z) for k = 0..n_stop by downward recurrence

    seed D_{n_stop} with :func:`lentz_dn`, then
    D_{k-1} = k/z - 1 / (D_k + k/z). Stable for all z.

    Args:
        z (torch.Tensor): complex argument(s)
        n_stop (int): highest order, >= 1
        kwargs: passed to :func:`lentz_dn` (`tol`, `max_iter`)

    Returns:
        torch.Tensor: tensor of shape (n_stop + 1, *z.shape)
    """
    _z = _as_complex(z)
    zinv = 1.0 / _z

    dns = [lentz_dn(_z, n_stop, **kwargs)]
    for k in range(int(n_stop), 0, -1):
        k_over_z = k * zinv
        dns.append(k_over_z - 1.0 / (dns[-1] + k_over_z))

    # inverse order: first dim is order 0..n_stop
    return torch.stack(dns[::-1], dim=0)


def use_upward_recurrence(m, x) -> bool:
    """Wiscombe's empirical stability envelope of the upward recurrence

    upward iff |Im(m) x| < (13.78 Re(m) - 10.8) Re(m) + 3.9
    """
    m = complex(m)
    return abs(m.imag * x) < ((13.78 * m.real - 10.8) * m.real + 3.9)


def log_derivative(m, x, n_stop: int, device=None, **kwargs):
    """D_k(m x) for k = 0..n_stop, recurrence direction chosen for (m, x)

    Args:
        m (complex): relative refractive index
        x (float): size parameter
        n_stop (int): highest order
        device (torch.device, optional): device of the result
        kwargs: passed to :func:`dn_down`

    Returns:
        torch.Tensor: 1D complex tensor of length n_stop + 1
    """
    z = torch.as_tensor(complex(m) * float(x), dtype=DTYPE_COMPLEX, device=device)
    if use_upward_recurrence(m, x):
        return dn_up(z, n_stop)
    else:
        return dn_down(z, n_stop, **kwargs)


def riccati_bessel_psi_xi(x, n_stop: int, device=None):
    """Riccati-Bessel functions psi_n(x) and xi_n(x), n = 0..n_stop

    real argument only. Upward recurrence on the complex xi_n:

        xi_{n+1} = (2n+1)/x xi_n - xi_{n-1}

    with psi_n = Re(xi_n), psi_0 = sin(x), xi_0 = sin(x) + i cos(x),
    psi_1 = sin(x)/x - cos(x), xi_1 = psi_1 + i (cos(x)/x + sin(x)).

    Args:
        x (float): size parameter
        n_stop (int): highest order
        device (torch.device, optional): device of the results

    Returns:
        torch.Tensor, torch.Tensor: psi (float64), xi (complex128)
    """
    x = float(x)
    sin_x = math.sin(x)
    cos_x = math.cos(x)

    xis = [complex(sin_x, cos_x), complex(sin_x / x - cos_x, cos_x / x + sin_x)]
    for n in range(1, int(n_stop)):
        xis.append((2.0 * n + 1.0) / x * xis[n] - xis[n - 1])

    xi = torch.as_tensor(xis[: n_stop + 1], dtype=DTYPE_COMPLEX, device=device)
    # psi is carried as the real part of xi
    psi = xi.real.clone()
    return psi, xi
