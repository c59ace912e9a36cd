# -*- coding: utf-8 -*-
"""package for various tools for pymiepol


helper modules
--------------

.. currentmodule:: pymiepol.helper

.. autosummary::
   :toctree: generated/

    helper


relevant tools
--------------

.. autosummary::
   :toctree: generated/

   helper.angle_grid
   helper.as_cosine_grid
   helper.get_truncation_wiscombe
   helper.get_float_dtype
   helper.size_parameter
   helper.mueller_elements
   helper.asymmetry_from_s11

"""
from .helper import angle_grid
from .helper import as_cosine_grid
from .helper import get_truncation_wiscombe
from .helper import get_float_dtype
from .helper import size_parameter
from .helper import mueller_elements
from .helper import asymmetry_from_s11
