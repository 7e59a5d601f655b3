import numpy as np
import pytest

from instances import Instance, make_classification, make_sequences
from learners.loss import HammingLoss, ZeroOneLoss, make_loss
from learners.pa import InvalidIndexError, PassiveAggressiveUpdater
from learners.problems import BinaryMargin, MulticlassMargin, SequenceMargin, make_strategy


def test_multiclass_update_moves_towards_reference():
    strategy = MulticlassMargin(n_features=3, n_labels=2)
    updater = PassiveAggressiveUpdater(strategy, ZeroOneLoss())
    weights = np.zeros(strategy.n_weights)
    instance = Instance(data=[0, 2], target=1)

    predicted = strategy.predict(instance, weights)
    assert predicted == 0
    loss = updater.update(instance, weights, predicted, 1.0)

    assert loss == 1.0
    # reference indices 1 and 5, predicted indices 0 and 4, squared norm 4
    np.testing.assert_allclose(weights, [-0.25, 0.25, 0.0, 0.0, -0.25, 0.25])
    assert strategy.predict(instance, weights) == 1


def test_multiclass_correct_prediction_is_passive():
    strategy = MulticlassMargin(n_features=3, n_labels=3)
    updater = PassiveAggressiveUpdater(strategy, ZeroOneLoss())
    weights = np.zeros(strategy.n_weights)
    assert updater.update(Instance(data=[1], target=2), weights, 2, 1.0) == 0.0
    assert not weights.any()


def test_multiclass_unknown_label_raises():
    strategy = MulticlassMargin(n_features=3, n_labels=2)
    updater = PassiveAggressiveUpdater(strategy, ZeroOneLoss())
    weights = np.zeros(strategy.n_weights)
    with pytest.raises(InvalidIndexError):
        updater.update(Instance(data=[0], target=5), weights, 0, 1.0)
    assert len(updater.diff) == 0


def test_binary_margin_flips_prediction():
    strategy = BinaryMargin(n_features=4)
    updater = PassiveAggressiveUpdater(strategy, ZeroOneLoss())
    weights = np.zeros(strategy.n_weights)
    instance = Instance(data=[1, 3], target=-1)

    assert strategy.predict(instance, weights) == 1
    updater.update(instance, weights, 1, 1.0)
    assert weights[1 * 2] == pytest.approx(0.25)
    assert weights[1 * 2 + 1] == pytest.approx(-0.25)
    assert strategy.predict(instance, weights) == -1
    assert strategy.index(0, 0) is None


@pytest.mark.parametrize(
    "strategy, data",
    [
        (BinaryMargin(n_features=4), [-1, 2]),
        (MulticlassMargin(n_features=4, n_labels=2), [4]),
        (SequenceMargin(n_features=4, n_labels=2), [[0], [-2]]),
    ],
)
def test_predict_rejects_out_of_range_features(strategy, data):
    weights = np.zeros(strategy.n_weights)
    with pytest.raises(ValueError):
        strategy.predict(Instance(data=data, target=None), weights)


def test_viterbi_prefers_best_path():
    strategy = SequenceMargin(n_features=2, n_labels=2)
    weights = np.zeros(strategy.n_weights)
    weights[strategy.emission(0, 0)] = 1.0
    weights[strategy.emission(1, 1)] = 1.5
    weights[strategy.transition(0, 1)] = -10.0
    instance = Instance(data=[[0], [1], [0]], target=None)

    assert strategy.predict(instance, weights) == [1, 1, 0]
    assert strategy.predict(Instance(data=[], target=[]), weights) == []


def test_sequence_margin_counts_mismatches():
    strategy = SequenceMargin(n_features=2, n_labels=2)
    updater = PassiveAggressiveUpdater(strategy, HammingLoss())
    weights = np.zeros(strategy.n_weights)
    instance = Instance(data=[[0], [1], [0]], target=[0, 1, 0])

    loss = updater.update(instance, weights, [0, 0, 0], 1.0)

    assert loss == 1.0
    # emission 3:+1, 2:-1; transitions (0,1):+1, (1,0):+1, (0,0):-2; norm 8
    assert updater.last_alpha == pytest.approx(1.0 / 8.0)
    assert weights[strategy.emission(1, 1)] == pytest.approx(0.125)
    assert weights[strategy.emission(1, 0)] == pytest.approx(-0.125)
    assert weights[strategy.transition(0, 0)] == pytest.approx(-0.25)
    assert weights[strategy.transition(1, 0)] == pytest.approx(0.125)


def test_sequence_length_mismatch_raises():
    strategy = SequenceMargin(n_features=2, n_labels=2)
    updater = PassiveAggressiveUpdater(strategy, HammingLoss())
    with pytest.raises(ValueError):
        updater.update(
            Instance(data=[[0], [1]], target=[0, 1]),
            np.zeros(strategy.n_weights),
            [0],
            1.0,
        )


def test_losses():
    assert ZeroOneLoss().score(1, 1) == 0.0
    assert ZeroOneLoss().score(1, 2) == 1.0
    assert HammingLoss().score([0, 1, 2], [0, 2, 1]) == 2.0
    with pytest.raises(ValueError):
        HammingLoss().score([0], [0, 1])
    with pytest.raises(ValueError):
        make_loss("hinge")


def test_make_strategy_dispatch():
    assert isinstance(make_strategy("binary", 5), BinaryMargin)
    assert make_strategy("multiclass", 5, 3).n_weights == 15
    assert make_strategy("sequence", 5, 3).n_weights == 15 + 9
    with pytest.raises(ValueError):
        make_strategy("ranking", 5)


def test_synthetic_labels_match_latent_model():
    rng = np.random.default_rng(0)
    strategy = MulticlassMargin(n_features=10, n_labels=3)
    instances, latent = make_classification(strategy, 20, active=3, rng=rng)
    assert len(instances) == 20
    for inst in instances:
        assert len(set(inst.data)) == 3
        assert inst.target == strategy.predict(inst, latent)
        assert inst.weight == 1.0

    seq = SequenceMargin(n_features=6, n_labels=2)
    sequences, latent = make_sequences(seq, 5, length=4, active=2, weighted=True, rng=rng)
    for inst in sequences:
        assert len(inst.data) == 4
        assert inst.target == seq.predict(inst, latent)
        assert 0.5 <= inst.weight <= 1.5
