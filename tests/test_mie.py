# encoding=utf-8
# %%
import unittest

import numpy as np
import torch
from scipy.special import spherical_jn, spherical_yn

import pymiepol as pmp


def bohren_huffman_reference(x, m, mu, n_stop):
    """Mie amplitudes from scipy spherical Bessel functions

    Bohren & Huffman eq. (4.53), h_n = j_n + i y_n, Im(m) > 0 absorbing.
    Re(m) = 0 is treated as perfect conductor.
    """
    n = np.arange(1, n_stop + 1)

    psi_x = x * spherical_jn(n, x)
    dpsi_x = spherical_jn(n, x) + x * spherical_jn(n, x, derivative=True)
    h_x = spherical_jn(n, x) + 1j * spherical_yn(n, x)
    dh_x = spherical_jn(n, x, derivative=True) + 1j * spherical_yn(n, x, derivative=True)
    xi_x = x * h_x
    dxi_x = h_x + x * dh_x

    if m.real == 0:
        a_n = dpsi_x / dxi_x
        b_n = psi_x / xi_x
    else:
        mx = m * x
        psi_mx = mx * spherical_jn(n, mx)
        dpsi_mx = spherical_jn(n, mx) + mx * spherical_jn(n, mx, derivative=True)
        a_n = (m * psi_mx * dpsi_x - psi_x * dpsi_mx) / (m * psi_mx * dxi_x - xi_x * dpsi_mx)
        b_n = (psi_mx * dpsi_x - m * psi_x * dpsi_mx) / (psi_mx * dxi_x - m * xi_x * dpsi_mx)

    q_sca = 2.0 / x**2 * np.sum((2 * n + 1) * (np.abs(a_n) ** 2 + np.abs(b_n) ** 2))
    q_ext = 2.0 / x**2 * np.sum((2 * n + 1) * (a_n + b_n).real)

    # angular functions
    s1 = np.zeros_like(mu, dtype=complex)
    s2 = np.zeros_like(mu, dtype=complex)
    pi_nm1 = np.zeros_like(mu)
    pi_n = np.ones_like(mu)
    for i, k in enumerate(n):
        tau_n = k * mu * pi_n - (k + 1) * pi_nm1
        f = (2 * k + 1) / (k * (k + 1))
        s1 += f * (a_n[i] * pi_n + b_n[i] * tau_n)
        s2 += f * (a_n[i] * tau_n + b_n[i] * pi_n)
        pi_nm1, pi_n = pi_n, ((2 * k + 1) * mu * pi_n - (k + 1) * pi_nm1) / k

    return dict(a_n=a_n, b_n=b_n, q_sca=q_sca, q_ext=q_ext, s1=s1, s2=s2)


class TestMieForward(unittest.TestCase):
    def setUp(self):
        self.mu = pmp.helper.angle_grid(181)
        # (x, m, relative tolerance of the efficiencies)
        self.cases = [
            (1.0, 1.33 + 0.0j, 1e-8),
            (10.0, 1.5 + 0.01j, 1e-8),
            (30.0, 1.5 + 1.0j, 1e-6),  # downward recurrence
            (2.0, 0.0 + 0.0j, 1e-8),  # perfect conductor
            (0.5, 1.5 + 0.1j, 1e-8),
        ]

    def test_forward_efficiency(self):
        for x, m, rtol in self.cases:
            res = pmp.mie(x, m, self.mu)
            n_stop = pmp.helper.get_truncation_wiscombe(x)
            ref = bohren_huffman_reference(x, m, self.mu.numpy(), n_stop)

            self.assertEqual(res["n_max"], n_stop)
            np.testing.assert_allclose(res["q_sca"], ref["q_sca"], rtol=rtol)
            np.testing.assert_allclose(res["q_ext"], ref["q_ext"], rtol=rtol)
            np.testing.assert_allclose(
                res["q_abs"], ref["q_ext"] - ref["q_sca"], rtol=rtol, atol=rtol
            )

    def test_forward_angular(self):
        for x, m, rtol in self.cases:
            res = pmp.mie(x, m, self.mu)
            n_stop = pmp.helper.get_truncation_wiscombe(x)
            ref = bohren_huffman_reference(x, m, self.mu.numpy(), n_stop)

            # the series runs in the conjugate convention of the amplitudes
            s1_ref = np.conj(ref["s1"])
            s2_ref = np.conj(ref["s2"])
            scale = np.max(np.abs(s2_ref))
            np.testing.assert_allclose(res["s1"].numpy(), s1_ref, rtol=rtol, atol=rtol * scale)
            np.testing.assert_allclose(res["s2"].numpy(), s2_ref, rtol=rtol, atol=rtol * scale)

            s11 = 0.5 * (np.abs(s2_ref) ** 2 + np.abs(s1_ref) ** 2)
            s12 = 0.5 * (np.abs(s2_ref) ** 2 - np.abs(s1_ref) ** 2)
            s33 = (np.conj(s1_ref) * s2_ref).real
            s43 = (np.conj(s1_ref) * s2_ref).imag
            smat_ref = np.stack((s11, s12, s33, s43), axis=-1)
            np.testing.assert_allclose(
                res["smatrix"].numpy(), smat_ref, rtol=rtol, atol=rtol * s11.max()
            )

    def test_forward_scattering_theorem(self):
        # optical theorem: Q_ext = 4 / x^2 Re S(0)
        mu = torch.as_tensor([1.0, 0.0, -1.0], dtype=torch.float64)
        for x, m in [(3.0, 1.33), (10.0, 1.5 + 0.01j), (25.0, 2.0 + 0.5j)]:
            res = pmp.mie(x, m, mu)
            s0 = res["s1"][0]
            np.testing.assert_allclose(res["s1"][0].numpy(), res["s2"][0].numpy(), rtol=1e-12)
            np.testing.assert_allclose(4.0 / x**2 * s0.real.item(), res["q_ext"], rtol=1e-9)

    def test_asymmetry_parameter(self):
        # g from the coefficients equals the normalized first moment of S11
        mu = pmp.helper.angle_grid(4001)
        for x, m in [(1.0, 1.33), (5.0, 1.5 + 0.01j)]:
            res = pmp.mie(x, m, mu)
            s11 = res["smatrix"][:, 0]
            # mu runs from 1 to -1, the sign cancels in the ratio
            g_table = torch.trapezoid(mu * s11, mu) / torch.trapezoid(s11, mu)
            np.testing.assert_allclose(float(g_table), res["g"], rtol=1e-4, atol=1e-6)

    def test_energy(self):
        # int_{-1}^{1} S11 dmu = x^2 Q_sca / 2
        mu = pmp.helper.angle_grid(4001)
        for x, m in [(1.0, 1.33), (3.0, 1.5 + 0.1j), (2.0, 0.0)]:
            res = pmp.mie(x, m, mu)
            integral = torch.trapezoid(res["smatrix"][:, 0], mu).abs()
            np.testing.assert_allclose(float(integral), x**2 * res["q_sca"] / 2.0, rtol=1e-4)


class TestMieInvariants(unittest.TestCase):
    def test_physical_bounds(self):
        mu = pmp.helper.angle_grid(361)
        for x, m in [
            (0.5, 1.33),
            (4.0, 1.5 + 0.001j),
            (20.0, 1.2 + 0.2j),
            (40.0, 1.5 + 2.0j),
            (1.0, 0.0),
        ]:
            res = pmp.mie(x, m, mu)
            smat = res["smatrix"]
            s11, s12, s33, s43 = smat.unbind(-1)

            self.assertGreaterEqual(res["q_sca"], 0.0)
            self.assertGreaterEqual(res["q_ext"], 0.0)
            self.assertGreaterEqual(res["q_abs"], -1e-10)
            self.assertLessEqual(abs(res["g"]), 1.0)

            self.assertTrue(torch.all(s11 >= 0))
            self.assertTrue(torch.all(s12.abs() <= s11 * (1 + 1e-9)))
            self.assertTrue(torch.all(s33**2 + s43**2 <= s11**2 * (1 + 1e-9) + 1e-30))

    def test_non_absorbing(self):
        res = pmp.mie(5.0, 1.33, pmp.helper.angle_grid(10))
        np.testing.assert_allclose(res["q_ext"], res["q_sca"], rtol=1e-10)

    def test_forward_backward_symmetry(self):
        # S1 = S2 at theta = 0 and S1 = -S2 at theta = pi
        res = pmp.mie(7.0, 1.5 + 0.05j, pmp.helper.angle_grid(50))
        smat = res["smatrix"]
        np.testing.assert_allclose(smat[0, 1].item(), 0.0, atol=1e-10 * smat[0, 0].item())
        np.testing.assert_allclose(smat[-1, 1].item(), 0.0, atol=1e-10 * smat[-1, 0].item())
        np.testing.assert_allclose(smat[0, 2].item(), smat[0, 0].item(), rtol=1e-10)
        np.testing.assert_allclose(smat[-1, 2].item(), -smat[-1, 0].item(), rtol=1e-10)

    def test_deterministic(self):
        mu = pmp.helper.angle_grid(100)
        res1 = pmp.mie(12.0, 1.5 + 0.3j, mu)
        res2 = pmp.mie(12.0, 1.5 + 0.3j, mu)
        self.assertTrue(torch.equal(res1["smatrix"], res2["smatrix"]))
        self.assertEqual(res1["g"], res2["g"])

    def test_default_grid(self):
        res = pmp.mie(2.0, 1.5)
        self.assertEqual(res["smatrix"].shape, (pmp.NANGLES, 4))
        self.assertEqual(res["smatrix"].dtype, torch.float64)
        self.assertEqual(res["x"], 2.0)
        self.assertEqual(res["m"], 1.5 + 0.0j)

    def test_precision(self):
        mu = pmp.helper.angle_grid(20)
        res_s = pmp.mie(2.0, 1.5, mu, precision="single")
        res_d = pmp.mie(2.0, 1.5, mu, precision="double")
        self.assertEqual(res_s["smatrix"].dtype, torch.float32)
        torch.testing.assert_close(res_s["smatrix"], res_d["smatrix"].to(torch.float32))
        self.assertEqual(res_s["q_sca"], res_d["q_sca"])

        with self.assertRaises(ValueError):
            pmp.mie(2.0, 1.5, mu, precision="quad")

    def test_large_sphere(self):
        res = pmp.mie(1000.0, 1.33, pmp.helper.angle_grid(50))
        # extinction paradox
        np.testing.assert_allclose(res["q_ext"], 2.0, rtol=5e-2)
        self.assertGreater(res["g"], 0.8)


class TestMieErrors(unittest.TestCase):
    def test_size_parameter(self):
        for x in [0.0, -1.0]:
            with self.assertRaises(pmp.ParameterOutOfRangeError) as cm:
                pmp.mie(x, 1.5)
            self.assertEqual(str(cm.exception), "sphere size must be positive")
            self.assertEqual(cm.exception.code, -6)

        with self.assertRaises(ValueError) as cm:
            pmp.mie(20001.0, 1.5)
        self.assertEqual(str(cm.exception), "spheres with x>20000 are not validated")

    def test_refractive_index(self):
        for m in [1.5 - 0.1j, -1.5]:
            with self.assertRaises(pmp.ParameterOutOfRangeError):
                pmp.mie(1.0, m)

    def test_cosine_grid(self):
        with self.assertRaises(pmp.ParameterOutOfRangeError):
            pmp.mie(1.0, 1.5, [1.0, 1.5])
        with self.assertRaises(pmp.ParameterOutOfRangeError):
            pmp.mie(1.0, 1.5, torch.zeros((2, 2), dtype=torch.float64))

    def test_lentz_budget(self):
        # forced downward recurrence with an exhausted iteration budget
        with self.assertRaises(pmp.NumericalNonConvergenceError):
            pmp.mie(30.0, 1.5 + 1.0j, pmp.helper.angle_grid(3), max_iter=2)


if __name__ == "__main__":
    unittest.main(argv=["first-arg-is-ignored"], exit=False)
