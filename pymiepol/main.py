# -*- coding: utf-8 -*-
"""
pymiepol.main
=============

High-level interface for one species of spherical scatterers.

The module defines the :class:`Sphere` class, which bundles radius, sphere
and medium refractive index, an optional Gaussian size spread and the device
on which the tables are built. It provides the quantities a polarized Monte
Carlo engine stores per medium: the Mueller matrix table over a cosine grid,
the asymmetry parameter and the scattering coefficient.

Typical usage
-------------

>>> import pymiepol as pmp
>>> s = pmp.Sphere(radius=0.5, n_sphere=1.59, n_env=1.33)
>>> res = s.get_scattering(wavelength=0.633)  # dict with smatrix, q_sca, g, ...
>>> mus = s.get_scattering_coefficient(wavelength=0.633, number_density=0.01)

Radius and wavelength only need a common length unit (e.g. micrometres);
the number density must use the inverse cube of that unit, the scattering
coefficient is then given per that unit.

"""
import math

import torch

from pymiepol import helper
from pymiepol.mie import mie, NANGLES
from pymiepol.poly import mie_poly


class Sphere:
    def __init__(self, radius, n_sphere, n_env=1.0, cv=None, device=None):
        """
        Initialise a species of homogeneous spheres.

        Parameters
        ----------
        radius : float
            Sphere radius (mean radius if `cv` is given).

        n_sphere : float or complex
            Refractive index of the sphere. Positive imaginary part is
            absorbing. A real part of 0 designates a perfect conductor.

        n_env : float, optional
            Refractive index of the surrounding medium. Defaults to ``1.0``.

        cv : float, optional
            Coefficient of variation of a Gaussian radius distribution. ``None``
            or ``0`` gives a monodisperse species.

        device : str or torch.device, optional
            Torch device of the default angle grid. Defaults to ``'cpu'``.
        """
        if device is None:
            self.device = "cpu"
        else:
            self.device = device

        assert float(radius) > 0, "sphere radius must be positive"
        assert float(n_env) > 0, "environment refractive index must be positive"

        self.radius = float(radius)
        self.n_sphere = complex(n_sphere)
        self.n_env = float(n_env)
        self.cv = cv

    def set_device(self, device):
        self.device = device

    def __repr__(self):
        out_str = ""
        if self.is_polydisperse:
            out_str += "polydisperse spheres (on device: {})\n".format(self.device)
            out_str += " - mean radius = {}\n".format(self.radius)
            out_str += " - CV          = {}\n".format(self.cv)
        else:
            out_str += "homogeneous sphere (on device: {})\n".format(self.device)
            out_str += " - radius      = {}\n".format(self.radius)
        out_str += " - n_sphere    = {}\n".format(self.n_sphere)
        out_str += " - environment = {}\n".format(self.n_env)
        return out_str

    @property
    def is_polydisperse(self):
        return self.cv is not None and self.cv != 0

    def get_relative_index(self) -> complex:
        """relative refractive index n_sphere / n_env"""
        return self.n_sphere / self.n_env

    def get_size_parameter(self, wavelength) -> float:
        """size parameter 2 pi r n_env / wavelength of the (mean) radius"""
        return helper.size_parameter(self.radius, self.n_env, wavelength)

    def get_scattering(self, wavelength, mu=None, n_angles=NANGLES, **kwargs) -> dict:
        """
        Compute the scattering table at one wavelength.

        Parameters
        ----------
        wavelength : float
            Vacuum wavelength, same unit as the radius.
        mu : torch.Tensor, optional
            Cosines of the scattering angles. Defaults to
            :func:`pymiepol.helper.angle_grid` with `n_angles` angles.
        n_angles : int, optional
            Number of angles of the default grid.
        **kwargs :
            Additional keyword arguments passed to :func:`pymiepol.mie` or
            :func:`pymiepol.mie_poly` (e.g. ``precision``, ``n_radii``).

        Returns
        -------
        dict
            result of :func:`pymiepol.mie` (monodisperse) or
            :func:`pymiepol.mie_poly` (polydisperse). Always contains
            ``smatrix``, ``q_sca``, ``q_ext``, ``q_abs`` and ``g``.
        """
        if mu is None:
            mu = helper.angle_grid(n_angles, device=self.device)

        if self.is_polydisperse:
            return mie_poly(
                self.radius,
                self.cv,
                self.get_relative_index(),
                self.n_env,
                wavelength,
                mu=mu,
                **kwargs,
            )
        else:
            return mie(
                self.get_size_parameter(wavelength),
                self.get_relative_index(),
                mu=mu,
                **kwargs,
            )

    def get_scattering_coefficient(self, wavelength, number_density, **kwargs) -> float:
        """
        Scattering coefficient mu_s = Q_sca * pi r^2 * number density.

        For polydisperse spheres r^2 is the mean squared radius of the
        sampled distribution.

        Parameters
        ----------
        wavelength : float
            Vacuum wavelength, same unit as the radius.
        number_density : float
            Number of spheres per unit volume.
        **kwargs :
            Passed to :meth:`get_scattering`.

        Returns
        -------
        float
            scattering coefficient, inverse length unit
        """
        kwargs.setdefault("n_angles", 2)  # the table itself is not needed
        res = self.get_scattering(wavelength, **kwargs)

        if self.is_polydisperse:
            # q_sca is cross section weighted: use the mean squared radius
            r_sq = float(torch.sum(res["weights"] * res["radii"] ** 2))
        else:
            r_sq = self.radius**2
        cs_geo = math.pi * r_sq
        return res["q_sca"] * cs_geo * float(number_density)
