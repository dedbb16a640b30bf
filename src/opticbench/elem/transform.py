#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Copyright © 2018 Michael J. Hayford
""" Rigid transforms for placing and aligning optical nodes

    An :class:`Isometry` packages a rotation matrix and a translation vector,
    i.e. the (rot_mat, t) tuple used throughout, and maps local coordinates
    into the parent (global) frame::

        p_global = rot_mat @ p_local + t

.. Created on Fri Feb  9 10:09:58 2018

.. codeauthor: Michael J. Hayford
"""

import numpy as np

from opticbench.util.misc_math import euler2rot3d, rot_v1_into_v2
from opticbench.util.units import check_finite_array


class Isometry():
    """ Rotation followed by translation, local to parent frame.

    Attributes:
        rot_mat: 3x3 orthonormal rotation matrix
        t: translation vector
    """
    def __init__(self, t=None, rot_mat=None):
        self.t = (np.array([0., 0., 0.]) if t is None
                  else np.array(t, dtype=float))
        self.rot_mat = (np.identity(3) if rot_mat is None
                        else np.array(rot_mat, dtype=float))
        check_finite_array(self.t, 'translation')
        check_finite_array(self.rot_mat, 'rotation')

    @classmethod
    def identity(cls):
        return cls()

    @classmethod
    def from_euler(cls, t=None, euler=(0., 0., 0.)):
        """ create from a translation and euler angles in degrees

        The angles follow the optical design convention of
        :func:`~.misc_math.euler2opt`.
        """
        return cls(t=t, rot_mat=euler2rot3d(np.array(euler, dtype=float)))

    @classmethod
    def along_z(cls, distance):
        return cls(t=[0., 0., distance])

    @classmethod
    def from_direction(cls, t, direction):
        """ frame at t whose z axis points along direction """
        return cls(t=t, rot_mat=rot_v1_into_v2([0., 0., 1.], direction))

    def __repr__(self):
        return (f"{type(self).__name__}(t={self.t.tolist()}, "
                f"rot_mat={self.rot_mat.tolist()})")

    def __eq__(self, other):
        if not isinstance(other, Isometry):
            return NotImplemented
        return (np.allclose(self.t, other.t, atol=1e-12) and
                np.allclose(self.rot_mat, other.rot_mat, atol=1e-12))

    def listobj_str(self):
        o_str = f"t: {self.t}\n"
        o_str += f"rot_mat:\n{self.rot_mat}\n"
        return o_str

    @property
    def tfrm(self):
        return self.rot_mat, self.t

    @property
    def z_axis(self):
        return self.rot_mat[:, 2]

    def append(self, other: 'Isometry') -> 'Isometry':
        """ compose: apply `other` in the local frame of `self` """
        return Isometry(t=np.matmul(self.rot_mat, other.t) + self.t,
                        rot_mat=np.matmul(self.rot_mat, other.rot_mat))

    def inverse(self) -> 'Isometry':
        rt = self.rot_mat.T
        return Isometry(t=-np.matmul(rt, self.t), rot_mat=rt)

    def transform_point(self, p):
        return np.matmul(self.rot_mat, p) + self.t

    def transform_vector(self, d):
        return np.matmul(self.rot_mat, d)

    def inverse_transform_point(self, p):
        return np.matmul(self.rot_mat.T, p - self.t)

    def inverse_transform_vector(self, d):
        return np.matmul(self.rot_mat.T, d)


def flip_about_y() -> Isometry:
    """ rotation by 180 degrees about the y axis, reversing z """
    return Isometry(rot_mat=np.diag([-1., 1., -1.]))
