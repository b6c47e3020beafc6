"""
Tests for volVectorField reading and writing.
"""

import numpy as np
import pytest

from foamcyl.config.defaults import DIMENSIONLESS
from foamcyl.errors import FieldMissingError, FieldShapeError, FoamFormatError
from foamcyl.foam import (
    FoamCase,
    PatchField,
    VolVectorField,
    read_foam_file,
    read_mesh,
    read_vol_vector_field,
    write_vol_vector_field,
)
from foamcyl.utils import vector_array

from conftest import BOX_CENTRES, HEADER, solid_body_velocity, write_vector_field


@pytest.fixture
def case(rotating_case):
    return FoamCase(rotating_case)


@pytest.fixture
def mesh(case):
    return read_mesh(case, '0')


class TestReadField:

    def test_internal_values(self, case, mesh):
        u = read_vol_vector_field(case, 'U', '0', mesh)
        assert u.name == 'U'
        assert u.internal.dims == ('cell', 'component')
        np.testing.assert_allclose(u.internal.values, solid_body_velocity(BOX_CENTRES))
        assert u.dimensions == (0, 1, -1, 0, 0, 0, 0)

    def test_fixed_value_patch(self, case, mesh):
        u = read_vol_vector_field(case, 'U', '0', mesh)
        walls = u.boundary['walls']
        assert walls.type == 'fixedValue'
        assert walls.value.shape == (8, 3)
        np.testing.assert_array_equal(walls.value.values, 0.0)
        np.testing.assert_array_equal(u.patch_values(mesh.patches['walls']).values, 0.0)

    def test_zero_gradient_patch_uses_cells(self, case, mesh):
        u = read_vol_vector_field(case, 'U', '0.1', mesh)
        assert u.boundary['walls'].value is None
        walls = mesh.patches['walls']
        expected = solid_body_velocity(BOX_CENTRES)[walls.face_cells]
        np.testing.assert_allclose(u.patch_values(walls).values, expected)

    def test_empty_patch(self, case, mesh):
        u = read_vol_vector_field(case, 'U', '0', mesh)
        assert u.boundary['frontAndBack'] == PatchField(type='empty')

    def test_uniform_internal_field(self, rotating_case, mesh):
        text = HEADER.format(cls="volVectorField", obj="U")
        text += "dimensions [0 1 -1 0 0 0 0];\ninternalField uniform (1 2 3);\nboundaryField {}\n"
        (rotating_case / "0.2" / "U").write_text(text)
        u = read_vol_vector_field(FoamCase(rotating_case), 'U', '0.2', mesh)
        np.testing.assert_array_equal(u.internal.values, [[1, 2, 3]] * 4)
        assert u.boundary == {}

    def test_other_dimensions(self, rotating_case, mesh):
        write_vector_field(rotating_case / "0.2" / "U", "U", np.zeros((4, 3)),
                           dimensions="[0 1 -2 0 0 0 0]")
        u = read_vol_vector_field(FoamCase(rotating_case), 'U', '0.2', mesh)
        assert u.dimensions == (0, 1, -2, 0, 0, 0, 0)

    def test_missing(self, case, mesh):
        with pytest.raises(FieldMissingError):
            read_vol_vector_field(case, 'U', '0.2', mesh)

    def test_wrong_size(self, rotating_case, mesh):
        write_vector_field(rotating_case / "0.2" / "U", "U", np.zeros((3, 3)))
        with pytest.raises(FieldShapeError):
            read_vol_vector_field(FoamCase(rotating_case), 'U', '0.2', mesh)

    def test_scalar_field_rejected(self, rotating_case, mesh):
        text = HEADER.format(cls="volScalarField", obj="U")
        text += "dimensions [0 1 -1 0 0 0 0];\ninternalField uniform 0;\nboundaryField {}\n"
        (rotating_case / "0.2" / "U").write_text(text)
        with pytest.raises(FieldShapeError):
            read_vol_vector_field(FoamCase(rotating_case), 'U', '0.2', mesh)

    def test_no_internal_field(self, rotating_case, mesh):
        (rotating_case / "0.2" / "U").write_text(HEADER.format(cls="volVectorField", obj="U"))
        with pytest.raises(FoamFormatError):
            read_vol_vector_field(FoamCase(rotating_case), 'U', '0.2', mesh)


class TestWriteField:

    def test_written_file_reads_back(self, case, mesh):
        values = np.arange(12, dtype=float).reshape(4, 3) / 7.0
        walls = mesh.patches['walls']
        vol_field = VolVectorField(
            name='Ucyl',
            internal=vector_array(values),
            boundary={
                'walls': PatchField('calculated', vector_array(np.ones((walls.n_faces, 3)), dim='face')),
                'frontAndBack': PatchField('empty'),
            },
        )
        path = write_vol_vector_field(case.time_dir('0') / 'Ucyl', vol_field, location='0')
        assert path.is_file()

        parsed = read_foam_file(path)
        assert parsed.header['object'] == 'Ucyl'
        assert parsed.header['class'] == 'volVectorField'
        assert parsed.entries['boundaryField']['frontAndBack'] == {'type': 'empty'}

        u = read_vol_vector_field(case, 'Ucyl', '0', mesh)
        np.testing.assert_allclose(u.internal.values, values, rtol=1e-11)
        assert u.boundary['walls'].type == 'calculated'
        np.testing.assert_array_equal(u.boundary['walls'].value.values, 1.0)

    def test_dimensions_written(self, tmp_path):
        vol_field = VolVectorField('cRad', vector_array(np.zeros((2, 3))), dimensions=DIMENSIONLESS)
        path = write_vol_vector_field(tmp_path / 'out' / 'cRad', vol_field)
        assert read_foam_file(path).entries['dimensions'] == (0, 0, 0, 0, 0, 0, 0)
        assert 'location' not in read_foam_file(path).header

    def test_patch_type_written_with_value(self, case, mesh):
        walls = mesh.patches['walls']
        vol_field = VolVectorField(
            name='Ucyl',
            internal=vector_array(np.zeros((4, 3))),
            boundary={
                'walls': PatchField('cyclicAMI', vector_array(np.ones((walls.n_faces, 3)), dim='face')),
                'frontAndBack': PatchField('wedge'),
            },
        )
        path = write_vol_vector_field(case.time_dir('0') / 'Ucyl', vol_field)
        boundary = read_foam_file(path).entries['boundaryField']
        assert boundary['walls']['type'] == 'cyclicAMI'
        assert 'value' in boundary['walls']
        assert boundary['frontAndBack'] == {'type': 'wedge'}
