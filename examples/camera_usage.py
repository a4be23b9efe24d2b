"""
Example: placing an object and a camera.

Demonstrates how to use cframe for:
- Building model transforms from position and axis-angle
- Building a camera view with look_at
- Producing column-major matrices for a shader uniform
- Transforming a batch of vertices
"""

import logging
import math

import numpy as np

from cframe import Transform, Vector3, look_at, perspective

# Configure logging to see degenerate-case substitutions
logging.basicConfig(level=logging.DEBUG, format="%(levelname)s: %(name)s: %(message)s")
logger = logging.getLogger(__name__)


def main():
    # Model: lift the object one unit and spin it a quarter turn about up
    model = Transform.from_position(Vector3(0, 1, 0)) * Transform.from_axis_angle(
        Vector3.up(), math.pi / 2
    )
    logger.info("Model frame: %s", model)

    # Camera: eye above and behind the origin, facing the object
    eye = Vector3(0, 3, 6)
    view = look_at(eye, Vector3(0, 1, 0))
    proj = perspective(math.radians(60.0), 16 / 9, 0.1, 100.0)

    model_view = view * model
    logger.info("Model-view uniform (column-major): %s", np.round(model_view.to_array(), 4))
    logger.info("Projection uniform (column-major): %s", np.round(proj, 4))

    # Vertices of a unit quad in object space
    quad = np.array(
        [[-0.5, -0.5, 0.0], [0.5, -0.5, 0.0], [0.5, 0.5, 0.0], [-0.5, 0.5, 0.0]],
        dtype=np.float64,
    )
    logger.info("Quad in camera space:\n%s", np.round(model_view.transform_points(quad), 4))

    # Degenerate inputs are substituted, not raised
    straight_down = Transform.from_position_facing(Vector3(0, 10, 0), Vector3.zero())
    logger.info("Facing straight down uses fallback basis: %s", straight_down)
    logger.info("look_at(eye, eye) -> %s", look_at(eye, eye))


if __name__ == "__main__":
    main()
