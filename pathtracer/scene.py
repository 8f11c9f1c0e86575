"""Scene loading from OBJ geometry plus JSON materials, and ray queries against it."""

from __future__ import annotations

import json
import logging
import math
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Mapping, Optional, Sequence, Tuple, Union

from pathtracer.lights import AreaLight, Light, PointLight
from pathtracer.materials import create_bxdf
from pathtracer.ray import Ray
from pathtracer.shape import Shape, SurfaceIntersection
from pathtracer.vecmath import Vec3

logger = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]
Corner = Tuple[Vec3, Optional[Vec3]]
Triangle = Tuple[Corner, Corner, Corner]


class ParseError(Exception):
    """The geometry file could not be read or understood."""


@dataclass
class ObjShape:
    """A named group of triangles from an OBJ file; corners carry position and normal."""

    name: str
    triangles: List[Triangle] = field(default_factory=list)


def _floats(parts: Sequence[str], lineno: int) -> Vec3:
    if len(parts) < 3:
        raise ParseError(f"line {lineno}: expected three coordinates")
    try:
        return Vec3(*(float(p) for p in parts[:3]))
    except ValueError as exc:
        raise ParseError(f"line {lineno}: {exc}") from None


def _resolve(token: str, items: Sequence[Vec3], kind: str, lineno: int) -> Vec3:
    try:
        index = int(token)
    except ValueError:
        raise ParseError(f"line {lineno}: bad {kind} index {token!r}") from None
    if index == 0:
        raise ParseError(f"line {lineno}: {kind} index 0 is invalid")
    resolved = index - 1 if index > 0 else len(items) + index
    if not 0 <= resolved < len(items):
        raise ParseError(f"line {lineno}: {kind} index {index} out of range")
    return items[resolved]


def _corner(token: str, positions: Sequence[Vec3], normals: Sequence[Vec3], lineno: int) -> Corner:
    fields = token.split("/")
    position = _resolve(fields[0], positions, "vertex", lineno)
    normal = None
    if len(fields) > 2 and fields[2]:
        normal = _resolve(fields[2], normals, "normal", lineno)
    return position, normal


def read_obj(path: PathLike) -> List[ObjShape]:
    """Read the shapes of an OBJ file; polygons are split into triangle fans."""
    try:
        text = Path(path).read_text()
    except OSError as exc:
        raise ParseError(f"cannot open file {os.fspath(path)}: {exc}") from exc

    positions: List[Vec3] = []
    normals: List[Vec3] = []
    shapes: List[ObjShape] = []
    current = ObjShape("")
    for lineno, raw in enumerate(text.splitlines(), start=1):
        parts = raw.split("#", 1)[0].split()
        if not parts:
            continue
        keyword, args = parts[0], parts[1:]
        if keyword == "v":
            positions.append(_floats(args, lineno))
        elif keyword == "vn":
            normals.append(_floats(args, lineno))
        elif keyword in ("o", "g"):
            if current.triangles:
                shapes.append(current)
            current = ObjShape(" ".join(args))
        elif keyword == "f":
            corners = [_corner(tok, positions, normals, lineno) for tok in args]
            if len(corners) < 3:
                raise ParseError(f"line {lineno}: face needs at least three vertices")
            first = corners[0]
            current.triangles.extend(
                (first, b, c) for b, c in zip(corners[1:], corners[2:])
            )
    if current.triangles:
        shapes.append(current)
    return shapes


def _vec(value: Any) -> Vec3:
    components = [0.0, 0.0, 0.0]
    for k, c in enumerate(list(value or [])[:3]):
        components[k] = 0.0 if c is None else float(c)
    return Vec3(*components)


@dataclass(frozen=True)
class _BuiltTriangle:
    geom_id: int
    prim_id: int
    v0: Vec3
    e1: Vec3
    e2: Vec3


class Scene:
    """Shapes, lights and camera position of a scene, with ray intersection."""

    def __init__(
        self,
        geometry_file: Optional[PathLike] = None,
        material_file: Optional[PathLike] = None,
    ) -> None:
        self.name = ""
        self.shapes: List[Shape] = []
        self.lights: List[Light] = []
        self.camera_coordinates = Vec3()
        self._triangles: Optional[List[_BuiltTriangle]] = None
        if geometry_file is not None and material_file is not None:
            self.name = os.fspath(geometry_file)
            self.load(geometry_file, material_file)

    def load(self, geometry_file: PathLike, material_file: PathLike) -> None:
        """Load geometry and materials; geometry parse errors are logged, not raised."""
        self.name = os.fspath(geometry_file)
        try:
            obj_shapes = read_obj(geometry_file)
            with open(material_file, "rb") as handle:
                materials = json.load(handle)
            if not isinstance(materials, dict):
                raise ValueError("material file must hold a JSON object")

            shapes = []
            for obj_shape in obj_shapes:
                logger.debug("Scene: found shape '%s'", obj_shape.name)
                shapes.append(self._read_shape(obj_shape, materials.get(obj_shape.name)))
            self.shapes.extend(shapes)
            self._read_lights(materials)
            camera = materials.get("camera")
            if camera is not None:
                self.camera_coordinates = _vec(camera.get("coordinates"))
                logger.debug("Scene: found camera %s", tuple(self.camera_coordinates))
        except ParseError as exc:
            logger.error("Geometry reader: %s", exc)
        self._triangles = None

    @staticmethod
    def _read_shape(obj_shape: ObjShape, material: Optional[Mapping[str, Any]]) -> Shape:
        shape = Shape(name=obj_shape.name)
        for triangle in obj_shape.triangles:
            for position, normal in triangle:
                if normal is None:
                    raise ParseError(f"shape '{obj_shape.name}' has a vertex without a normal")
                shape.add_vertex(position, normal)
        shape.area = shape.compute_area()
        if material is not None:
            shape.bxdf = create_bxdf(material)
        return shape

    def _read_lights(self, materials: Mapping[str, Any]) -> None:
        for shape_name, area_light in (materials.get("areaLights") or {}).items():
            shape = next((s for s in self.shapes if s.name == shape_name), None)
            if shape is None:
                logger.error("Scene: found area light corresponding to unknown shape '%s'", shape_name)
                continue
            logger.debug("Scene: identified shape '%s' as an area light", shape.name)
            light = AreaLight(
                shape, _vec(area_light.get("radiance")), bool(area_light.get("twoSided", False))
            )
            self.lights.append(light)
            shape.area_light = light
        for point_light in materials.get("pointLights") or []:
            logger.debug("Scene: found point light '%s'", point_light.get("name", ""))
            self.lights.append(
                PointLight(_vec(point_light.get("pos")), _vec(point_light.get("radiance")))
            )

    def build(self) -> None:
        """Prepare the triangles of all shapes for ray queries."""
        if not self.name:
            raise RuntimeError("Scene: no scene loaded")
        triangles = []
        for geom_id, shape in enumerate(self.shapes):
            for prim_id in range(shape.num_faces()):
                a, b, c = shape.get_face(prim_id)
                triangles.append(_BuiltTriangle(geom_id, prim_id, a, b - a, c - a))
        self._triangles = triangles

    def _closest_hit(self, ray: Ray, first: bool = False):
        if self._triangles is None:
            raise RuntimeError("Scene: build() must be called before ray queries")
        origin, direction = ray.origin, ray.direction
        best_t = ray.tfar
        best = None
        for tri in self._triangles:
            pvec = direction.cross(tri.e2)
            det = tri.e1.dot(pvec)
            if det == 0.0:
                continue
            inv = 1.0 / det
            tvec = origin - tri.v0
            u = tvec.dot(pvec) * inv
            if u < 0.0 or u > 1.0:
                continue
            qvec = tvec.cross(tri.e1)
            v = direction.dot(qvec) * inv
            if v < 0.0 or u + v > 1.0:
                continue
            t = tri.e2.dot(qvec) * inv
            if t < ray.tnear or t > best_t:
                continue
            best_t, best = t, (tri, u, v)
            if first:
                break
        return best_t, best

    def intersect(self, ray: Ray) -> SurfaceIntersection:
        """Closest hit along the ray; records tfar, geom_id and prim_id on the ray."""
        t, hit = self._closest_hit(ray)
        if hit is None:
            return SurfaceIntersection()
        tri, u, v = hit
        ray.tfar = t
        ray.geom_id = tri.geom_id
        ray.prim_id = tri.prim_id
        shape = self.shapes[tri.geom_id]
        normal = shape.interpolate_normal(tri.prim_id, u, v).normalized()
        return SurfaceIntersection(shape=shape, pos=ray.at(t), normal=normal)

    def occluded(self, ray: Ray) -> bool:
        """Whether anything lies on the ray's interval; sets tfar to -inf if so."""
        _, hit = self._closest_hit(ray, first=True)
        if hit is None:
            return False
        ray.tfar = -math.inf
        return True

    def light(self, index: int) -> Light:
        return self.lights[index]