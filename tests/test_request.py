import pytest

from simulation import Direction, InvalidRequestError, Request


def test_desired_direction():
    assert Request(1, 18).desired_direction is Direction.UP
    assert Request(18, 1).desired_direction is Direction.DOWN


def test_same_floor_request_is_rejected():
    with pytest.raises(InvalidRequestError):
        Request(5, 5, 3)


def test_request_is_immutable():
    request = Request(2, 9, 4)
    with pytest.raises(AttributeError):
        request.origin = 3  # type: ignore[misc]
    assert str(request) == "Request{2->9}"
