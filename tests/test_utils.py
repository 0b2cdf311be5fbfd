"""
Tests for Helpers
=================

Validation helpers, initializers, activations and losses.
"""

import numpy as np
import pytest

from convlayer.utils import (init_matrix, to_matrix, is_matrix_square, match_dimensions,
                             check_learning_rate, get_initializer, iterate_samples,
                             set_random_seed)
from convlayer.activations import ReLU, Sigmoid, Tanh, Linear, get_activation
from convlayer.losses import MSELoss, get_loss


class TestValidation:
    """Tests for matrix and learning rate validation."""

    def test_init_matrix(self):
        m = init_matrix(4)
        assert m.shape == (4, 4)
        assert m.dtype == np.float64
        assert not m.any()

    def test_to_matrix(self):
        m = to_matrix([[1, 2], [3, 4]], 'test')
        assert m.dtype == np.float64
        np.testing.assert_array_equal(m, [[1.0, 2.0], [3.0, 4.0]])

    def test_to_matrix_rejects_ragged(self, capsys):
        assert to_matrix([[1, 2], [3]], 'ragged op') is None
        assert 'ragged op' in capsys.readouterr().err

    def test_to_matrix_rejects_complex(self, capsys):
        """Complex arrays and complex lists are both refused, never truncated."""
        assert to_matrix(np.eye(2) * (1 + 1j), 'complex op') is None
        assert to_matrix([[1j, 0], [0, 1]], 'complex op') is None
        assert 'complex values are not supported' in capsys.readouterr().err

    def test_is_matrix_square(self, capsys):
        assert is_matrix_square(np.zeros((3, 3)), 'op')
        assert not is_matrix_square(np.zeros((3, 2)), 'op')
        assert not is_matrix_square(np.zeros(3), 'op')
        assert 'must be square' in capsys.readouterr().err

    def test_match_dimensions(self, capsys):
        assert match_dimensions(4, 4, 'op')
        assert not match_dimensions(4, 3, 'feedforward')
        assert 'expected 4, got 3' in capsys.readouterr().err

    @pytest.mark.parametrize("lr", [1e-6, 0.5, 1, 10.0, np.float32(0.1)])
    def test_valid_learning_rate(self, lr):
        assert check_learning_rate(lr, 'op')

    @pytest.mark.parametrize("lr", [0, -1e-3, float('nan'), float('inf'), None, '1', False,
                                 10 ** 400, -10 ** 400])
    def test_invalid_learning_rate(self, lr):
        assert not check_learning_rate(lr, 'op')


class TestInitializers:
    """Tests for weight initializers."""

    @pytest.mark.parametrize("name", ['uniform', 'he', 'xavier', 'zeros', 'He', 'Glorot'])
    def test_lookup_by_name(self, name):
        init = get_initializer(name)
        values = init((3, 3), 9)
        assert np.shape(values) == (3, 3)

    def test_uniform_range(self):
        np.random.seed(0)
        values = get_initializer('uniform')((50, 50), 2500)
        assert values.min() >= 0.0 and values.max() < 1.0

    def test_he_scale(self):
        np.random.seed(0)
        values = get_initializer('he')((200, 200), 9)
        assert abs(np.std(values) - np.sqrt(2.0 / 9)) < 0.02

    def test_callable_passthrough(self):
        def init(shape, fan_in):
            return np.zeros(shape)

        assert get_initializer(init) is init

    def test_unknown_name(self):
        with pytest.raises(ValueError):
            get_initializer('lecun')

    def test_set_random_seed(self, capsys):
        set_random_seed(11)
        first = np.random.rand()
        set_random_seed(11)
        assert np.random.rand() == first
        assert 'Random seed set to 11' in capsys.readouterr().out


class TestIterateSamples:
    """Tests for iterate_samples."""

    def test_in_order(self):
        X = np.arange(12).reshape(3, 2, 2)
        Y = X * 10

        pairs = list(iterate_samples(X, Y, shuffle=False))

        assert len(pairs) == 3
        for i, (x, y) in enumerate(pairs):
            np.testing.assert_array_equal(x, X[i])
            np.testing.assert_array_equal(y, Y[i])

    def test_shuffled_keeps_pairs(self):
        np.random.seed(4)
        X = np.arange(40).reshape(10, 2, 2)
        Y = X * 10

        pairs = list(iterate_samples(X, Y, shuffle=True))

        assert sorted(int(x[0, 0]) for x, _ in pairs) == list(range(0, 40, 4))
        for x, y in pairs:
            np.testing.assert_array_equal(y, x * 10)


class TestActivations:
    """Tests for activation functions."""

    def test_relu(self):
        relu = ReLU()
        np.testing.assert_array_equal(relu(np.array([-1.0, 0.0, 2.0])), [0.0, 0.0, 2.0])
        np.testing.assert_array_equal(relu.backward(np.array([-1.0, 0.0, 2.0])), [0.0, 0.0, 1.0])

    def test_sigmoid(self):
        sigmoid = Sigmoid()
        assert sigmoid(np.array(0.0)) == 0.5
        assert sigmoid.backward(np.array(0.0)) == 0.25

    def test_tanh(self):
        tanh = Tanh()
        assert tanh(np.array(0.0)) == 0.0
        assert tanh.backward(np.array(0.0)) == 1.0

    def test_linear(self):
        x = np.array([-3.0, 4.0])
        np.testing.assert_array_equal(Linear()(x), x)
        np.testing.assert_array_equal(Linear().backward(x), [1.0, 1.0])

    @pytest.mark.parametrize("name, cls", [('relu', ReLU), ('ReLU', ReLU), ('tanh', Tanh),
                                           ('sigmoid', Sigmoid), ('none', Linear),
                                           (None, Linear)])
    def test_get_activation(self, name, cls):
        assert isinstance(get_activation(name), cls)

    def test_instance_passthrough(self):
        act = Tanh()
        assert get_activation(act) is act

    def test_unknown(self):
        with pytest.raises(ValueError):
            get_activation('gelu')


class TestMSELoss:
    """Tests for MSELoss."""

    def test_value(self):
        loss = MSELoss()
        assert loss(np.array([[1.0, 2.0], [3.0, 4.0]]), np.zeros((2, 2))) == 7.5

    def test_gradient(self):
        loss = MSELoss()
        pred = np.array([[1.0, 2.0], [3.0, 4.0]])
        np.testing.assert_array_equal(loss.backward(pred, np.zeros((2, 2))), pred / 2)

    def test_get_loss(self):
        assert isinstance(get_loss('mse'), MSELoss)
        assert isinstance(get_loss('Mean-Squared-Error'), MSELoss)
        with pytest.raises(ValueError):
            get_loss('hinge')


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
