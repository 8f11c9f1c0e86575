"""Triangle meshes and the record of a ray hitting one."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Optional, Sequence, Tuple

from pathtracer.vecmath import Vec3

if TYPE_CHECKING:
    from pathtracer.bxdf import BxDF


@dataclass(eq=False)
class Shape:
    """Unindexed triangle mesh: every face owns three consecutive vertices."""

    name: str = ""
    vertices: List[Vec3] = field(default_factory=list)
    normals: List[Vec3] = field(default_factory=list)
    indices: List[int] = field(default_factory=list)
    bxdf: Optional["BxDF"] = None
    area_light: Optional[object] = None
    area: float = 0.0

    def num_vertices(self) -> int:
        return len(self.indices)

    def num_faces(self, vertex_face: int = 3) -> int:
        return self.num_vertices() // vertex_face

    def get_vertex_id(self, vertex: Vec3, normal: Vec3) -> Optional[int]:
        """Index of the first vertex with this position and normal, or None."""
        return next(
            (
                index
                for index, (v, n) in enumerate(zip(self.vertices, self.normals))
                if v == vertex and n == normal
            ),
            None,
        )

    def add_vertex(self, vertex: Vec3, normal: Vec3) -> None:
        self.vertices.append(vertex)
        self.normals.append(normal)
        self.indices.append(len(self.vertices) - 1)

    def _check_face(self, face_id: int) -> None:
        if not 0 <= face_id < self.num_faces():
            raise IndexError(f"face {face_id} outside mesh of {self.num_faces()} faces")

    def get_vertex(self, face_id: int, vertex_id: int) -> Vec3:
        self._check_face(face_id)
        if not 0 <= vertex_id < 3:
            raise IndexError(f"vertex {vertex_id} outside a triangle")
        return self.vertices[self.indices[face_id * 3 + vertex_id]]

    def get_face(self, face_id: int) -> Tuple[Vec3, Vec3, Vec3]:
        return (
            self.get_vertex(face_id, 0),
            self.get_vertex(face_id, 1),
            self.get_vertex(face_id, 2),
        )

    def sample_uniform(self, face_id: int, u: Sequence[float]) -> Vec3:
        """Uniformly distributed point on the given triangle."""
        root = math.sqrt(u[0])
        alpha = 1.0 - root
        beta = (1.0 - u[1]) * root
        gamma = u[1] * root
        a, b, c = self.get_face(face_id)
        return alpha * a + beta * b + gamma * c

    def barycentric(self, p: Vec3, face_id: int) -> Tuple[float, float]:
        """Barycentric (u, v) of p with respect to vertices 1 and 2 of the face."""
        a, b, c = self.get_face(face_id)
        v0, v1, v2 = b - a, c - a, p - a
        d00, d01, d11 = v0.dot(v0), v0.dot(v1), v1.dot(v1)
        d20, d21 = v2.dot(v0), v2.dot(v1)
        denom = d00 * d11 - d01 * d01
        if denom == 0.0:
            raise ValueError(f"face {face_id} is degenerate")
        inv = 1.0 / denom
        return (d11 * d20 - d01 * d21) * inv, (d00 * d21 - d01 * d20) * inv

    def interpolate_normal(self, face_id: int, u: float, v: float) -> Vec3:
        """Unnormalised vertex normal interpolated at barycentric (u, v)."""
        self._check_face(face_id)
        n0, n1, n2 = (self.normals[self.indices[face_id * 3 + k]] for k in range(3))
        return (1.0 - u - v) * n0 + u * n1 + v * n2

    def compute_area(self) -> float:
        """Total surface area of all faces."""
        total = 0.0
        for face_id in range(self.num_faces()):
            a, b, c = self.get_face(face_id)
            total += 0.5 * (b - a).cross(c - a).length()
        return total


@dataclass
class SurfaceIntersection:
    """Where a ray met a shape; shape is None when nothing was hit."""

    shape: Optional[Shape] = None
    pos: Vec3 = field(default_factory=Vec3)
    normal: Vec3 = field(default_factory=Vec3)