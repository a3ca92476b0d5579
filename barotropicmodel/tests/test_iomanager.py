"""Test netCDF input and output."""
import numpy as np
import pytest

from barotropicmodel import (
    BarotropicModel,
    NetCDFIOManager,
    RossbyHaurwitzWave,
    TimeLevel,
    TimeManager,
)

pytest.importorskip("netCDF4")
xr = pytest.importorskip("xarray")

OLD, NEW = TimeLevel.OLD, TimeLevel.NEW


@pytest.fixture
def time_manager():
    return TimeManager("2000-01-01", "2000-01-01 02:00", 1800.0)


@pytest.fixture
def model(time_manager):
    m = BarotropicModel()
    m.initialize(time_manager, 16, 9)
    m.populate(RossbyHaurwitzWave())
    return m


@pytest.fixture
def io(model):
    return model.io


class TestOutput:
    """Test writing of fields."""

    def test_write(self, io, model, tmp_path):
        """Test file name and content."""
        file = io.register_output_file(str(tmp_path / "out.{step:03d}.nc"), 3600.0)
        file.register_fields(*model.state)
        path = io.write(file, OLD)
        assert path == tmp_path / "out.000.nc"

        with xr.open_dataset(path) as ds:
            assert set(ds.data_vars) == {"u", "v", "gd", "ghs"}
            assert ds.gd.dims == ("time", "lat", "lon")
            assert ds.gd.attrs["units"] == "m2 s-2"
            np.testing.assert_array_equal(
                ds.gd.values[0], model.geopotential_depth.interior(OLD)
            )
            assert ds.time.values[0] == np.datetime64("2000-01-01")

    def test_time_in_pattern(self, io, model, tmp_path):
        """Test formatting of the model time."""
        file = io.register_output_file(str(tmp_path / "out_{time}.nc"), 0.0)
        file.register_fields(model.state.gd)
        path = io.write(file)
        assert path.name == "out_2000-01-01T00:00:00.nc"

    def test_is_due(self, io, time_manager):
        """Test output interval."""
        file = io.register_output_file("out.{step}.nc", 3600.0)
        assert io.is_due(file)
        file.last_written = time_manager.current_time
        assert not io.is_due(file)
        time_manager.advance()
        assert not io.is_due(file)
        time_manager.advance()
        assert io.is_due(file)

    def test_negative_interval(self, io):
        """Test negative output interval raises ValueError."""
        with pytest.raises(ValueError):
            io.register_output_file("out.nc", -1.0)

    def test_write_input_file_raises(self, io, tmp_path):
        """Test input files cannot be written."""
        file = io.register_input_file(tmp_path / "in.nc")
        with pytest.raises(ValueError):
            io.write(file)

    def test_duplicate_field(self, io, model):
        """Test fields are registered once."""
        file = io.register_output_file("out.nc", 0.0)
        with pytest.raises(ValueError):
            file.register_fields(model.state.u, model.state.u)


class TestInput:
    """Test reading of fields."""

    def test_round_trip(self, io, model, tmp_path):
        """Test written fields are read back unchanged."""
        out = io.register_output_file(str(tmp_path / "state.nc"), 0.0)
        out.register_fields(*model.state)
        path = io.write(out, OLD)

        other = BarotropicModel()
        other.initialize(model.time_manager, 16, 9)
        other.load_input(path)
        for name in ("u", "v", "gd"):
            np.testing.assert_array_equal(
                other.state.by_name()[name][OLD], model.state.by_name()[name][OLD]
            )
        assert other.io.files == []

    def test_read_into_level(self, io, model, tmp_path):
        """Test reading into another time slot without halo update."""
        out = io.register_output_file(str(tmp_path / "state.nc"), 0.0)
        out.register_fields(model.state.gd)
        path = io.write(out, OLD)

        file = io.register_input_file(path)
        file.register_fields(model.state.gd)
        io.open(file)
        io.read(file, NEW)
        io.close(file)
        np.testing.assert_array_equal(
            model.state.gd.interior(NEW), model.state.gd.interior(OLD)
        )
        assert np.all(model.state.gd[NEW][0] == 0.0)

    def test_nearest_time(self, io, model, time_manager, tmp_path):
        """Test selection of the record nearest to the model time."""
        gd = model.geopotential_depth
        times = np.array(["1999-12-31", "2000-01-01", "2000-01-02"], dtype="datetime64[ns]")
        data = np.stack([gd.interior(OLD) + k for k in (-1.0, 0.0, 1.0)])
        ds = xr.Dataset(
            {"gd": (("time", "lat", "lon"), data)},
            coords=dict(
                time=times,
                lat=gd.as_dataarray(OLD).lat.values,
                lon=gd.as_dataarray(OLD).lon.values,
            ),
        )
        path = tmp_path / "series.nc"
        ds.to_netcdf(path)

        gd.data[...] = 0.0
        file = io.register_input_file(path)
        file.register_fields(gd)
        io.open(file)
        io.read(file, OLD)
        io.remove_file(file)
        np.testing.assert_array_equal(gd.interior(OLD), data[1])

    def test_descending_latitude(self, io, model, tmp_path):
        """Test input from north to south is flipped."""
        da = model.geopotential_depth.as_dataarray(OLD)
        expected = da.values.copy()
        path = tmp_path / "flipped.nc"
        da.isel(lat=slice(None, None, -1)).to_dataset().to_netcdf(path)

        gd = model.geopotential_depth
        file = io.register_input_file(path)
        file.register_fields(gd)
        io.open(file)
        io.read(file, NEW)
        io.remove_file(file)
        np.testing.assert_array_equal(gd.interior(NEW), expected)

    def test_missing_field(self, io, model, tmp_path):
        """Test missing variables raise ValueError."""
        path = tmp_path / "partial.nc"
        model.geopotential_depth.as_dataarray(OLD).to_dataset().to_netcdf(path)
        file = io.register_input_file(path)
        file.register_fields(*model.state)
        io.open(file)
        with pytest.raises(ValueError, match="u, v"):
            io.read(file)
        io.remove_file(file)

    def test_wrong_shape(self, model, time_manager, tmp_path):
        """Test variables on another mesh raise ValueError."""
        path = tmp_path / "coarse.nc"
        model.geopotential_depth.as_dataarray(OLD).to_dataset().to_netcdf(path)

        other = BarotropicModel()
        other.initialize(time_manager, 32, 17)
        with pytest.raises(ValueError):
            other.load_input(path)
        assert other.io.files == []

    def test_read_closed_file(self, io, model, tmp_path):
        """Test reading requires an open file."""
        file = io.register_input_file(tmp_path / "in.nc")
        with pytest.raises(ValueError):
            io.read(file)

    def test_open_output_file(self, io):
        """Test output files cannot be opened for reading."""
        file = io.register_output_file("out.nc", 0.0)
        with pytest.raises(ValueError):
            io.open(file)

    def test_unregistered_file(self, io, model, time_manager):
        """Test files of another manager are rejected."""
        other = NetCDFIOManager(model.mesh, time_manager)
        file = other.register_input_file("in.nc")
        with pytest.raises(ValueError):
            io.open(file)
