# encoding: utf-8
"""
getting started
===============

demonstration of basic pymiepol functionality:

- Mueller matrix table of a single sphere
- polydisperse suspension vs. monodisperse spheres
- Whittle-Matern random medium
- scattering coefficient of a medium
"""
# %%
# imports
# -------

import torch
import matplotlib.pyplot as plt

import pymiepol as pmp

# %%
# setup
# -----
# polystyrene spheres in water, radius and wavelength in micrometres.
# The scatterer species is wrapped up in an instance of `Sphere`.

# - config
wl0 = 0.633
radius = 0.5
n_sphere = 1.59
n_env = 1.33

mu = pmp.helper.angle_grid(500)
theta = torch.acos(mu)

# - setup the spheres
s_mono = pmp.Sphere(radius=radius, n_sphere=n_sphere, n_env=n_env)
s_poly = pmp.Sphere(radius=radius, n_sphere=n_sphere, n_env=n_env, cv=0.1)
print(s_mono)
print(s_poly)

# %%
# Mueller matrix table
# --------------------
# S11 is the phase function, the other elements are plotted normalized to S11

res_mono = s_mono.get_scattering(wl0, mu=mu)
res_poly = s_poly.get_scattering(wl0, mu=mu, n_radii=101)
print("monodisperse: Q_sca={:.4f}, g={:.4f}".format(res_mono["q_sca"], res_mono["g"]))
print("polydisperse: Q_sca={:.4f}, g={:.4f}".format(res_poly["q_sca"], res_poly["g"]))

# - plot
labels = ["$S_{11}$", "$S_{12}/S_{11}$", "$S_{33}/S_{11}$", "$S_{43}/S_{11}$"]
plt.figure(figsize=(8, 6))
for i, label in enumerate(labels):
    plt.subplot(2, 2, i + 1, title=label)
    for res, name in [(res_mono, "mono"), (res_poly, "CV=0.1")]:
        s11 = res["smatrix"][:, 0]
        values = s11 if i == 0 else res["smatrix"][:, i] / s11
        plt.plot(torch.rad2deg(theta), values, label=name)
    if i == 0:
        plt.yscale("log")
        plt.legend()
    plt.xlabel("scattering angle (deg)")
plt.tight_layout()
# plt.savefig("ex_01a.svg", dpi=300)
plt.show()

# %%
# Whittle-Matern random medium
# ----------------------------
# phase functions for increasing correlation length

plt.figure()
for l_c in [0.05, 0.2, 1.0]:
    res_wm = pmp.whittle_matern(l_c, 3.0, wl0 / n_env, mu=mu)
    plt.plot(
        torch.rad2deg(theta),
        res_wm["smatrix"][:, 0],
        label="$l_c$={} um, g={:.3f}".format(l_c, res_wm["g"]),
    )
plt.yscale("log")
plt.xlabel("scattering angle (deg)")
plt.ylabel("$S_{11}$")
plt.legend()
plt.tight_layout()
# plt.savefig("ex_01b.svg", dpi=300)
plt.show()

# %%
# scattering coefficient
# ----------------------
# number density in spheres per cubic micrometre

rho = 0.01
print("mu_s = {:.4f} 1/um".format(s_mono.get_scattering_coefficient(wl0, rho)))
