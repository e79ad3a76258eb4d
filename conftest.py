import matplotlib

matplotlib.use("Agg")

import pytest

import pyconvection as pc


# Taichi is started once on the cpu backend; tests choose the engine per component
@pytest.fixture(scope="session", autouse=True)
def taichi_cpu():
    pc.environment.initialise(pc.constants.CPU)
    yield
    pc.environment.reboot()


@pytest.fixture(params=[pc.constants.SEQUENTIAL, pc.constants.CPU])
def strategy(request):
    return request.param
