# -*- coding: utf-8 -*-
"""
error types raised by the scattering kernels

All kernel failures are fatal for the calling table: there is nothing to
retry, the caller has to fix its input.
"""


class MieError(Exception):
    """base class of all pymiepol errors"""

    code = -1


class ParameterOutOfRangeError(MieError, ValueError):
    """an input parameter lies outside the validated domain of a kernel

    `code` mirrors the error code used by the photon transport engine.
    """

    code = -6


class NumericalNonConvergenceError(MieError, ArithmeticError):
    """an iterative evaluation did not converge within its iteration bound"""

    code = -6
