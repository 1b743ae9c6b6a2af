# tracekit

The core pieces of a small ray tracer, written for reading and for
experiments:

- `tracekit.common`: string parsing helpers (`to_bool`, `to_int`, `to_uint`,
  `to_float`, `to_vector3f`, `tokenize`, `indent`), human-readable time and
  memory strings (`time_string`, `mem_string`), math helpers (`clamp`,
  `lerp`, `mod`, `rad_to_deg`, `deg_to_rad`, `fresnel`) and constants such as
  `EPSILON` and `INV_PI`. Errors are raised as `TracerError`.
- `tracekit.vector`: vectors as numpy arrays (`vec`, `format_vector`,
  `normalized`, `spherical_direction`, `spherical_coordinates`,
  `coordinate_system`).
- `tracekit.color`: the immutable `Color3` with arithmetic, sRGB conversion
  (`to_srgb`, `to_linear_rgb`), `is_valid`, `luminance` and `max_coeff`.
- `tracekit.timer`: a `Timer` that counts whole milliseconds (`elapsed`,
  `lap`, and their `_string` forms).
- `tracekit.ray`: `Ray` segments `o + t*d` for `t` in `[mint, maxt]`, with
  `reverse` and `with_segment`.
- `tracekit.bbox`: n-dimensional `BoundingBox` objects. A box tests
  containment and overlap, measures distances, grows and clips, and tests
  a ray against itself (`ray_intersect`, `ray_interval`).
- `tracekit.bsdf`: the `BSDF` interface, `BSDFQueryRecord`, `Measure`, and
  the `Diffuse`, `Mirror` and `Dielectric` materials. `Mirror.sample`
  reflects the incident direction; `Diffuse` and `Dielectric` offer `eval`
  and `pdf`.
- `tracekit.mesh`: triangle `Mesh` objects, shading `Frame`s and
  `Intersection` records. A mesh intersects a ray with one triangle using
  Möller–Trumbore and returns `(u, v, t)` or `None`.
- `tracekit.obj`: a Wavefront OBJ loader (`load_obj`, `parse_obj`,
  `ObjVertex`). Quads are split into two triangles.
- `tracekit.accel`: `Accel`, a brute-force search over the triangles of a
  single mesh that returns the closest `Intersection` or `None`.
- `tracekit.bitmap`: `Bitmap`, a linear RGB image that tonemaps to 8-bit
  sRGB and saves as PNG.
- `tracekit.block`: `ImageBlock`, which accumulates samples through a
  reconstruction filter, and `BlockGenerator`, which hands out image tiles
  in a spiral from the centre.

Progress messages (OBJ loading, PNG writing, dropped invalid samples) go to
the standard `logging` module.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Example

Load a mesh, shoot a ray at it and look at the hit:

```python
from tracekit.accel import Accel
from tracekit.obj import load_obj
from tracekit.ray import Ray
from tracekit.vector import vec

mesh = load_obj("scene/bunny.obj")
mesh.activate()          # assigns a Diffuse BSDF when none was given

accel = Accel()
accel.add_mesh(mesh)
accel.build()

ray = Ray(vec(0.0, 0.0, 5.0), vec(0.0, 0.0, -1.0))
hit = accel.ray_intersect(ray, False)
if hit is not None:
    print(hit.p, hit.t, hit.sh_frame.n)
```

Splatting samples into an `ImageBlock` needs a reconstruction filter: any
object with a `radius` attribute and an `eval(x)` method. The block tabulates
it once when it is created.

```python
import math

from tracekit.block import BlockGenerator, ImageBlock
from tracekit.color import Color3


class GaussianFilter:
    radius = 2.0

    def eval(self, x):
        return math.exp(-2.0 * x * x)


image = ImageBlock((64, 64), GaussianFilter())
image.put((10.5, 20.5), Color3(1.0, 0.5, 0.25))

tiles = BlockGenerator((64, 64), 32)
tile = ImageBlock((32, 32), GaussianFilter())
while tiles.next(tile):
    tile.clear()
    # ... put samples into tile ...
    image.put_block(tile)

image.to_bitmap().save_png("out")   # writes out.png
```

`Bitmap.save_png` adds the `.png` extension itself. A block created without
a filter can still hold finished pixels through `from_bitmap`, but `put` on
it raises `TracerError`.

## What the package does not do

tracekit is a library of parts, not a renderer. It has no command to run,
no integrators that shade rays, no cameras, samplers or reconstruction
filter classes of its own, no scene file loading, no OpenEXR reading or
writing, and no preview window. Only a single mesh can be registered with
`Accel`, and `Mesh.add_child` accepts BSDFs only.