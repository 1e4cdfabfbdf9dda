import math

import pytest
import torch

from kord.models import BoundedSigmoid


@pytest.mark.parametrize("strength", [0.01, 1.0, 3.5, 50.0])
def test_zero_input_is_exactly_half(strength):
    act = BoundedSigmoid(strength)
    out = act(torch.zeros(3, 5))
    assert torch.equal(out, torch.full((3, 5), 0.5))


def test_output_shape_and_open_bounds():
    act = BoundedSigmoid(2.0)
    # |k * x| <= 8 stays clear of float32 saturation
    x = (torch.rand(4, 7, 3) * 2 - 1) * 4
    out = act(x)
    assert out.shape == x.shape
    assert torch.all(out > 0) and torch.all(out < 1)


@pytest.mark.parametrize("strength", [1.0, 4.0, 50.0])
def test_large_inputs_saturate_within_closed_bounds(strength):
    act = BoundedSigmoid(strength)
    x = torch.tensor([-1000.0, -30.0, 30.0, 1000.0])
    out = act(x)
    assert not torch.isnan(out).any()
    assert torch.all(out >= 0) and torch.all(out <= 1)
    assert out[0].item() == 0.0 and out[-1].item() == 1.0


@pytest.mark.parametrize("strength", [0.5, 1.0, 4.0])
def test_monotonic_increasing(strength):
    act = BoundedSigmoid(strength)
    x = torch.linspace(-8.0 / strength, 8.0 / strength, 101)
    out = act(x)
    assert torch.all(out[1:] > out[:-1])


def test_monotonic_non_decreasing_through_saturation():
    out = BoundedSigmoid(4.0)(torch.linspace(-20, 20, 401))
    assert torch.all(out[1:] >= out[:-1])


def test_steepness_scales_input():
    x = torch.tensor([0.5, -1.0, 2.0])
    assert torch.allclose(BoundedSigmoid(3.0)(x), torch.sigmoid(3.0 * x))


@pytest.mark.parametrize("strength", [0.0, -1.0, math.inf, math.nan])
def test_invalid_strength_rejected(strength):
    with pytest.raises(ValueError):
        BoundedSigmoid(strength)


def test_fixed_strength_is_buffer_not_parameter():
    act = BoundedSigmoid(2.0)
    assert list(act.parameters()) == []
    assert "strength" in act.state_dict()


def test_trainable_strength_receives_gradient():
    act = BoundedSigmoid(2.0, trainable=True)
    assert [n for n, _ in act.named_parameters()] == ["strength"]
    act(torch.tensor([1.0, 2.0])).sum().backward()
    assert act.strength.grad is not None
    assert act.strength.grad.item() != 0.0
