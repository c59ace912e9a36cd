# encoding=utf-8
#
# Copyright (C) 2025, pymiepol developers
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.
#
"""
pymiepol - Mueller matrix tables for polarized Monte Carlo photon transport

Precomputes angular scattering tables (S11, S12, S33, S43), scattering
efficiency and asymmetry parameter for spheres (Lorenz-Mie series and its
small particle expansion), Gaussian polydisperse sphere suspensions and
Whittle-Matern continuous random media, implemented in pytorch.

API
===

Sphere class
------------

The :class:`pymiepol.Sphere` class describes a scatterer species as seen by
the photon transport engine and gives high-level access to the kernels:

.. currentmodule:: pymiepol

.. autosummary::
   :recursive:
   :toctree: generated/

   Sphere


Kernels
-------

.. autosummary::
   :toctree: generated/

   mie
   small_mie
   mie_poly
   whittle_matern


Special
-------

logarithmic derivative of the Riccati-Bessel function: Lentz continued
fraction, upward and downward recurrences.

.. autosummary::
   :toctree: generated/

   special


Helper
------

angle grids, Wiscombe truncation, Mueller elements, trapezoidal asymmetry
parameter.

.. autosummary::
   :toctree: generated/

   helper

"""

__name__ = "pymiepol"
__version__ = "0.2"
__date__ = "10/18/2026"  # MM/DD/YYY
__license__ = "GPL3"
__status__ = "alpha"

__copyright__ = "Copyright 2025-2026"
__author__ = "pymiepol developers"
__maintainer__ = "pymiepol developers"
__email__ = ""
# other contributors:
__credits__ = []


# --- populate namespace
# import here all modules, subpackages, functions, classes available from the package
# that should be available from the top-level of the package namespace

# modules
from pymiepol.main import Sphere
from pymiepol.mie import mie, small_mie, NANGLES
from pymiepol.poly import mie_poly
from pymiepol.whittle import whittle_matern
from pymiepol.exceptions import (
    MieError,
    ParameterOutOfRangeError,
    NumericalNonConvergenceError,
)
from . import special
from . import helper
from . import exceptions
