"""Build scattering functions from material descriptions in the scene file."""

from __future__ import annotations

from typing import Any, Callable, Dict, Mapping

from pathtracer.bxdf import BlinnPhongBRDF, BxDF, LambertianDiffuseBRDF, PhongBRDF
from pathtracer.ggx import GGX
from pathtracer.microfacet import ConductorBxDF, DielectricBxDF
from pathtracer.vecmath import Vec3


def _float(material: Mapping[str, Any], key: str) -> float:
    value = material.get(key)
    return 0.0 if value is None else float(value)


def _vec(material: Mapping[str, Any], key: str) -> Vec3:
    value = material.get(key)
    if value is None:
        return Vec3()
    components = [float(c) for c in list(value)[:3]]
    components += [0.0] * (3 - len(components))
    return Vec3(*components)


def _ggx(material: Mapping[str, Any]) -> GGX:
    return GGX(_float(material, "alphaX"), _float(material, "alphaY"))


_FACTORIES: Dict[str, Callable[[Mapping[str, Any]], BxDF]] = {
    "LambertianDiffuseBRDF": lambda m: LambertianDiffuseBRDF(_vec(m, "diffuse")),
    "BlinnPhongBRDF": lambda m: BlinnPhongBRDF(
        _vec(m, "diffuse"), _vec(m, "specular"), _float(m, "shininess")
    ),
    "PhongBRDF": lambda m: PhongBRDF(
        _vec(m, "diffuse"), _vec(m, "specular"), _float(m, "shininess")
    ),
    "ConductorBxDF": lambda m: ConductorBxDF(_vec(m, "eta"), _vec(m, "k"), _ggx(m)),
    "DielectricBxDF": lambda m: DielectricBxDF(_float(m, "eta"), _ggx(m)),
}


def create_bxdf(material: Mapping[str, Any]) -> BxDF:
    """Create the BxDF named by the material's "BxDF" entry; missing numbers read as 0."""
    name = material.get("BxDF", "")
    try:
        factory = _FACTORIES[name]
    except (KeyError, TypeError):
        raise ValueError(f"unknown BxDF {name!r}") from None
    return factory(material)