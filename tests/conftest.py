"""
Pytest fixtures for the foamcyl test suite.

Cases are written as plain OpenFOAM ASCII text so the readers are tested
against files they did not produce themselves.
"""

import logging
from pathlib import Path

import numpy as np
import pytest


HEADER = """\
FoamFile
{{
    version     2.0;
    format      ascii;
    class       {cls};
    object      {obj};
}}
"""


def _vec(v):
    return "(" + " ".join(repr(float(x)) for x in v) + ")"


def box_mesh(nx, ny, nz, lower=(0.0, 0.0, 0.0), upper=(1.0, 1.0, 1.0)):
    """
    Build a structured hex mesh.

    Returns points, faces, owner, neighbour and a patch list of
    (name, type, start, size): 'walls' (x and y sides) and
    'frontAndBack' (z sides, empty).
    """
    xs = np.linspace(lower[0], upper[0], nx + 1)
    ys = np.linspace(lower[1], upper[1], ny + 1)
    zs = np.linspace(lower[2], upper[2], nz + 1)

    def pid(i, j, k):
        return i + (nx + 1) * (j + (ny + 1) * k)

    def cid(i, j, k):
        return i + nx * (j + ny * k)

    def x_face(i, j, k):
        return [pid(i, j, k), pid(i, j + 1, k), pid(i, j + 1, k + 1), pid(i, j, k + 1)]

    def y_face(i, j, k):
        return [pid(i, j, k), pid(i, j, k + 1), pid(i + 1, j, k + 1), pid(i + 1, j, k)]

    def z_face(i, j, k):
        return [pid(i, j, k), pid(i + 1, j, k), pid(i + 1, j + 1, k), pid(i, j + 1, k)]

    points = [(xs[i], ys[j], zs[k])
              for k in range(nz + 1) for j in range(ny + 1) for i in range(nx + 1)]

    internal = []
    for k in range(nz):
        for j in range(ny):
            for i in range(1, nx):
                internal.append((cid(i - 1, j, k), cid(i, j, k), x_face(i, j, k)))
    for k in range(nz):
        for j in range(1, ny):
            for i in range(nx):
                internal.append((cid(i, j - 1, k), cid(i, j, k), y_face(i, j, k)))
    for k in range(1, nz):
        for j in range(ny):
            for i in range(nx):
                internal.append((cid(i, j, k - 1), cid(i, j, k), z_face(i, j, k)))
    internal.sort(key=lambda f: (f[0], f[1]))

    walls = []
    for k in range(nz):
        for j in range(ny):
            walls.append((cid(0, j, k), x_face(0, j, k)[::-1]))
            walls.append((cid(nx - 1, j, k), x_face(nx, j, k)))
    for k in range(nz):
        for i in range(nx):
            walls.append((cid(i, 0, k), y_face(i, 0, k)[::-1]))
            walls.append((cid(i, ny - 1, k), y_face(i, ny, k)))

    front_back = []
    for j in range(ny):
        for i in range(nx):
            front_back.append((cid(i, j, 0), z_face(i, j, 0)[::-1]))
            front_back.append((cid(i, j, nz - 1), z_face(i, j, nz)))

    faces = [f for _, _, f in internal] + [f for _, f in walls] + [f for _, f in front_back]
    owner = [o for o, _, _ in internal] + [o for o, _ in walls] + [o for o, _ in front_back]
    neighbour = [n for _, n, _ in internal]

    start = len(internal)
    patches = [
        ("walls", "wall", start, len(walls)),
        ("frontAndBack", "empty", start + len(walls), len(front_back)),
    ]
    return np.array(points), faces, owner, neighbour, patches


def write_polymesh(mesh_dir: Path, mesh, points=None):
    """Write polyMesh files; ``points`` overrides the mesh's points."""
    pts, faces, owner, neighbour, patches = mesh
    if points is not None:
        pts = points
    mesh_dir.mkdir(parents=True, exist_ok=True)

    text = HEADER.format(cls="vectorField", obj="points")
    text += f"\n{len(pts)}\n(\n" + "\n".join(_vec(p) for p in pts) + "\n)\n"
    (mesh_dir / "points").write_text(text)

    text = HEADER.format(cls="faceList", obj="faces")
    text += f"\n{len(faces)}\n(\n"
    text += "\n".join(f"{len(f)}(" + " ".join(str(v) for v in f) + ")" for f in faces)
    text += "\n)\n"
    (mesh_dir / "faces").write_text(text)

    for name, labels in (("owner", owner), ("neighbour", neighbour)):
        text = HEADER.format(cls="labelList", obj=name)
        text += f"\n{len(labels)}\n(\n" + "\n".join(str(v) for v in labels) + "\n)\n"
        (mesh_dir / name).write_text(text)

    text = HEADER.format(cls="polyBoundaryMesh", obj="boundary")
    text += f"\n{len(patches)}\n(\n"
    for name, ptype, start, size in patches:
        text += f"    {name}\n    {{\n        type {ptype};\n"
        if ptype == "wall":
            text += "        inGroups        List<word> 1(wall);\n"
        text += f"        nFaces {size};\n        startFace {start};\n    }}\n"
    text += ")\n"
    (mesh_dir / "boundary").write_text(text)


def write_dynamic_mesh_dict(constant_dir: Path, axis="(0 0 1)", origin="(0 0 0)", layout="classic"):
    constant_dir.mkdir(parents=True, exist_ok=True)
    text = HEADER.format(cls="dictionary", obj="dynamicMeshDict")
    if layout == "classic":
        text += f"""
dynamicFvMesh   solidBodyMotionFvMesh;
motionSolverLibs ( "libfvMotionSolvers.so" );

solidBodyMotionFvMeshCoeffs
{{
    cellZone        rotor;
    solidBodyMotionFunction rotatingMotion;
    rotatingMotionCoeffs
    {{
        origin      {origin};
        axis        {axis};   // rotation axis
        omega       6.2832;   /* rad/s */
    }}
}}
"""
    else:
        text += f"""
dynamicFvMesh   dynamicMotionSolverFvMesh;
motionSolver    solidBody;
cellZone        rotor;
solidBodyMotionFunction rotatingMotion;
origin          {origin};
axis            {axis};
omega           10;
"""
    (constant_dir / "dynamicMeshDict").write_text(text)


def write_vector_field(path: Path, name, values, wall_value=None, dimensions="[0 1 -1 0 0 0 0]"):
    """Write a volVectorField with a 'walls' and an empty 'frontAndBack' patch."""
    path.parent.mkdir(parents=True, exist_ok=True)
    text = HEADER.format(cls="volVectorField", obj=name)
    text += f"\ndimensions      {dimensions};\n\n"
    text += f"internalField   nonuniform List<vector>\n{len(values)}\n(\n"
    text += "\n".join(_vec(v) for v in values) + "\n)\n;\n\n"
    text += "boundaryField\n{\n"
    if wall_value is None:
        text += "    walls\n    {\n        type zeroGradient;\n    }\n"
    else:
        text += f"    walls\n    {{\n        type fixedValue;\n        value uniform {_vec(wall_value)};\n    }}\n"
    text += "    frontAndBack\n    {\n        type empty;\n    }\n}\n"
    path.write_text(text)


def solid_body_velocity(centres, omega=2.0, w=0.5):
    """U = omega z x r + w z for a rotation about the z axis through the origin."""
    centres = np.asarray(centres)
    return np.column_stack([-omega * centres[:, 1], omega * centres[:, 0], np.full(len(centres), w)])


# 2x2x1 cells around the z axis; cell centres at (+-0.5, +-0.5, 0.5)
BOX = dict(nx=2, ny=2, nz=1, lower=(-1.0, -1.0, 0.0), upper=(1.0, 1.0, 1.0))
BOX_CENTRES = np.array([
    [-0.5, -0.5, 0.5],
    [0.5, -0.5, 0.5],
    [-0.5, 0.5, 0.5],
    [0.5, 0.5, 0.5],
])


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers installed by setup_logging() so they do not outlive a test."""
    yield
    logger = logging.getLogger("foamcyl")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def box():
    return box_mesh(**BOX)


@pytest.fixture
def rotating_case(tmp_path, box):
    """
    Case with a z-axis rotation, time 0 and 0.1 holding U and 0.2 without U.
    """
    root = tmp_path / "case"
    write_polymesh(root / "constant" / "polyMesh", box)
    write_dynamic_mesh_dict(root / "constant")
    velocity = solid_body_velocity(BOX_CENTRES)
    write_vector_field(root / "0" / "U", "U", velocity, wall_value=(0.0, 0.0, 0.0))
    write_vector_field(root / "0.1" / "U", "U", velocity)
    (root / "0.2").mkdir()
    return root
