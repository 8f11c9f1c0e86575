# pathtracer

A physically based path tracer written in pure Python. It reads scene
geometry from a Wavefront OBJ file and materials, lights and the camera
position from a JSON file, traces rays through the scene and writes the
result as a JPEG image (through Pillow).

Features:

- Four integrators: `WhittedIntegrator`, `RandomWalkIntegrator`,
  `DirectIlluminationIntegrator` and `IndirectIlluminationIntegrator`
  (the default: light sampling at every vertex plus Russian roulette).
- Materials: Lambertian diffuse, Phong, Blinn-Phong, and GGX microfacet
  conductors and dielectrics (smooth or rough).
- Area lights (any shape in the scene) and point lights.
- Gamma correction (1/2.2) followed by extended Reinhard tone mapping.

## Installation

```
pip install .
```

## Rendering from the command line

```
pathtracer --scene scene.obj scene.json --save render.jpeg --spp 128 --depth 6
```

Options:

| Option | Meaning | Default |
| --- | --- | --- |
| `--scene GEOMETRY MATERIALS` | OBJ geometry file and JSON material file | — |
| `--save PATH` | where the JPEG image is written | `../Renders/image.jpeg` |
| `--spp N` | samples per pixel | `64` |
| `--depth N` | maximum path depth | `4` |
| `--integrator NAME` | one of the integrator names above | `IndirectIlluminationIntegrator` |
| `--gui` | accepted, but only logs that no interactive display exists; the image is still rendered to file | off |

The image is 800 × 800 pixels. An unknown option, a missing value or a
non-integer for `--spp`/`--depth` logs an error and the usage line and
exits with status 0. Errors while loading or rendering (an unreadable
material file, an unknown material or integrator name, a shape without a
material being hit, no scene loaded) are logged and the command exits
with status 1. Progress and errors go to the standard `logging` module;
when no handler is configured the command sets up one at DEBUG level.

The sample count starts at one and doubles round by round until it
reaches `--spp`; the accumulated radiance is then divided by `--spp`,
gamma corrected, tone mapped and saved.

## Scene files

Every named object (`o` or `g`) in the OBJ file becomes a shape. Faces
must give a normal for each vertex (`f v//vn ...` or `f v/vt/vn ...`);
polygons with more than three corners are split into triangle fans.
Geometry errors are logged and the offending file contributes no shapes.

The JSON file holds one entry per shape name with its material, plus the
lights and, optionally, the camera position:

```json
{
  "floor":  { "BxDF": "LambertianDiffuseBRDF", "diffuse": [0.8, 0.8, 0.8] },
  "teapot": { "BxDF": "BlinnPhongBRDF", "diffuse": [0.5, 0.1, 0.1],
              "specular": [0.4, 0.4, 0.4], "shininess": 64 },
  "sphere": { "BxDF": "ConductorBxDF", "eta": [0.2, 0.92, 1.1],
              "k": [3.9, 2.45, 2.14], "alphaX": 0.1, "alphaY": 0.1 },
  "glass":  { "BxDF": "DielectricBxDF", "eta": 1.5, "alphaX": 0.0, "alphaY": 0.0 },
  "lamp":   { "BxDF": "LambertianDiffuseBRDF", "diffuse": [0.0, 0.0, 0.0] },

  "areaLights": {
    "lamp": { "radiance": [17.0, 12.0, 4.0], "twoSided": false }
  },
  "pointLights": [
    { "name": "key", "pos": [0.0, 1.5, 0.0], "radiance": [5.0, 5.0, 5.0] }
  ],
  "camera": { "coordinates": [0.0, 1.0, 3.5] }
}
```

Material types: `LambertianDiffuseBRDF`, `PhongBRDF`, `BlinnPhongBRDF`,
`ConductorBxDF` and `DielectricBxDF`; missing numeric entries read as 0.
Microfacet materials with both roughness values below `0.001` are treated
as perfectly smooth. An area light's emitted radiance is its `radiance`
divided by the shape's area (and by two more when `twoSided` is true).
The camera sits at `coordinates` and looks down the −z axis.

## Using the package from Python

```python
from pathtracer.scene import Scene
from pathtracer.integrators import create_integrator
from pathtracer.renderer import Renderer

scene = Scene("scene.obj", "scene.json")
renderer = Renderer(create_integrator("DirectIlluminationIntegrator", scene, 4),
                    width=200, height=200)
renderer.render(16, "render.jpeg")
```

`Renderer.render_pass()` traces one sample per pixel into
`Renderer.framebuffer`, and `Renderer.finalize(spp)` averages, gamma
corrects and tone maps it in place, for callers that want to drive the
loop themselves.

The vector maths, sampling routines, BxDFs and tone maps also work on
their own:

```python
from pathtracer.vecmath import Vec3, fresnel_dielectric

normal = Vec3(0.0, 0.0, 1.0)
incoming = Vec3(0.0, 0.0, 1.0)
reflectance = fresnel_dielectric(normal, incoming, 1.5)  # about 0.04
```

Modules: `vecmath`, `sampling`, `ggx`, `ray`, `tonemap`, `image`,
`shape`, `bxdf`, `microfacet`, `materials`, `lights`, `light_sampler`,
`scene`, `camera`, `integrators`, `renderer` and `cli`.

## What it does not do

- There is no interactive window: `--gui` does not open a display.
- Ray intersection tests every triangle for every ray, with no
  acceleration structure and no parallelism, so it suits small scenes and
  low resolutions.
- Output is JPEG only; the image size is fixed on the command line.

## Running the tests

```
pip install ".[test]"
pytest
```