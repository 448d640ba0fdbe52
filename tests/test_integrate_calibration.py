from hitproc.calibration import ChannelCalibrator, calibrate
from hitproc.integrate import triangle_integral


def test_triangle_integral():
    assert triangle_integral(100, 300) == 200
    assert triangle_integral(300, 100) == 200
    assert triangle_integral(0, 0) == 0


def test_calibrate_floors_at_zero():
    assert calibrate(50, 80) == 0
    assert calibrate(80, 80) == 0
    assert calibrate(1000, 80) == 920


def test_channel_calibrator_per_channel_offsets():
    cal = ChannelCalibrator([10, 500])
    assert cal.channels == 2
    assert cal.apply(0, 100) == 90
    assert cal.apply(1, 100) == 0
