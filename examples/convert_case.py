"""
Basic foamcyl Workflow Example

This script converts the velocity of an OpenFOAM rotating-mesh case to
cylindrical components and plots the result for the latest time.

Workflow:
1. Read the rotation axis from constant/dynamicMeshDict
2. Select time directories
3. Convert U to Ucyl for every selected time (optionally saving cRad, cTheta)
4. Read the latest Ucyl back and bin it by distance from the axis
5. Plot radial, tangential and axial velocity against radius
"""

import numpy as np
import matplotlib.pyplot as plt
import foamcyl as fc

# =============================================================================
# Configuration
# =============================================================================

# Path to the OpenFOAM case directory
CASE_DIR = "/path/to/your/case"

# Analysis parameters
SAVE_UNIT_VECTORS = True  # Also write cRad and cTheta
N_R_BINS = 40  # Number of radial bins for the profile

fc.setup_logging()

# =============================================================================
# Step 1: Read the Rotation Axis
# =============================================================================

case = fc.FoamCase(CASE_DIR)
axis = fc.read_rotation_axis(case)
seed = fc.pick_seed_direction(axis.axis)

print(f"Axis:   {axis.axis}")
print(f"Origin: {axis.origin}")

# =============================================================================
# Step 2: Select Times
# =============================================================================

times = fc.select_times(case, fc.TimeSelection(no_zero=True))
print(f"Selected {len(times)} time(s): {times[0]} ... {times[-1]}")

# =============================================================================
# Step 3: Convert
# =============================================================================

results = fc.convert_case(case, times, axis, save_unit_vectors=SAVE_UNIT_VECTORS, seed=seed)

written = [r for r in results if r.status is fc.StepStatus.WRITTEN]
for r in results:
    print(f"  {r.time_name:>10s}: {r.status.value} ({r.n_cells} cells, {r.n_on_axis} on axis)")

if not written:
    raise SystemExit("No time step had a U field")

# =============================================================================
# Step 4: Radial Profile of the Latest Time
# =============================================================================

latest = written[-1].time_name
mesh = fc.read_mesh(case, latest)
ucyl = fc.read_vol_vector_field(case, 'Ucyl', latest, mesh).internal

basis = fc.compute_cylindrical_basis(mesh.cell_centres, axis)
radius = basis['radius'].values

r_edges = np.linspace(0.0, radius.max(), N_R_BINS + 1)
r_mid = 0.5 * (r_edges[1:] + r_edges[:-1])
index = np.clip(np.digitize(radius, r_edges) - 1, 0, N_R_BINS - 1)
counts = np.bincount(index, minlength=N_R_BINS)

profiles = {}
for label in ['r', 'theta', 'z']:
    sums = np.bincount(index, weights=ucyl.sel(component=label).values, minlength=N_R_BINS)
    profiles[label] = np.where(counts > 0, sums / np.maximum(counts, 1), np.nan)

print(f"\nProfile at time {latest}:")
print(f"  max |u_theta|: {np.nanmax(np.abs(profiles['theta'])):.3g}")
print(f"  mean u_z:      {np.nanmean(profiles['z']):.3g}")

# =============================================================================
# Step 5: Visualization
# =============================================================================

fig, axes = plt.subplots(1, 3, figsize=(14, 4), sharex=True)

for ax, label, title in zip(axes, ['r', 'theta', 'z'], ['Radial', 'Tangential', 'Axial']):
    ax.plot(r_mid, profiles[label], 'b-', linewidth=2)
    ax.axhline(0, color='k', linestyle='-', linewidth=0.5)
    ax.set_xlabel('Distance from axis (m)')
    ax.set_ylabel(f'u_{label} (m/s)')
    ax.set_title(f'{title} Velocity, t = {latest}')
    ax.grid(True, alpha=0.3)

plt.tight_layout()
plt.savefig('cylindrical_profiles.png', dpi=150, bbox_inches='tight')
print("\nSaved cylindrical_profiles.png")
