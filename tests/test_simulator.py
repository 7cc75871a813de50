import pytest

from okey_sim.engine.game import ChestTier
from okey_sim.presets import PRESETS, Preset, get_preset, list_presets
from okey_sim.simulator import SimulationStats, Simulator, run_simulation_batch


def test_single_game_summary():
    summary = Simulator(seed=5).run()

    assert summary.final_score == sum(score for _, score in summary.plays)
    assert summary.chest in ChestTier
    assert summary.preset_used == "standard"
    events = [e.event_type for e in summary.history.events]
    assert events[0] == "game_start"
    assert events[-1] == "game_end"
    assert events.count("play") == len(summary.plays)
    assert events.count("discard") == len(summary.discards)


def test_verbose_run_prints_turns(capsys):
    summary = Simulator(seed=5).run(verbose=True)
    out = capsys.readouterr().out
    assert out.count("discard") == len(summary.discards)


def test_batch_counts_partition_games():
    stats = Simulator(seed=1).run_batch(25)

    assert stats.total_games == 25
    assert stats.bronze_count + stats.silver_count + stats.gold_count == 25
    assert 0 <= stats.average_score <= stats.high_score
    odds = stats.chest_odds
    assert odds.bronze + odds.silver + odds.gold == pytest.approx(1.0)


def test_seeded_batches_are_reproducible():
    first = run_simulation_batch(15, seed=99)
    second = run_simulation_batch(15, seed=99)
    assert first == second


def test_batch_requires_a_game():
    with pytest.raises(ValueError):
        Simulator().run_batch(0)


def test_progress_callback():
    calls = []
    Simulator(seed=3).run_batch(4, on_progress=lambda done, total: calls.append((done, total)))
    assert calls == [(1, 4), (2, 4), (3, 4), (4, 4)]


def test_stopping_early_reports_partial_aggregate():
    played = []
    stats = Simulator(seed=3).run_batch(
        50,
        on_progress=lambda done, total: played.append(done),
        should_stop=lambda: len(played) >= 3,
    )
    assert stats.total_games == 3
    assert stats.bronze_count + stats.silver_count + stats.gold_count == 3


def test_stats_from_scores_buckets_on_thresholds():
    stats = SimulationStats.from_scores([299, 300, 399, 400, 120])

    assert (stats.bronze_count, stats.silver_count, stats.gold_count) == (2, 2, 1)
    assert stats.high_score == 400
    assert stats.average_score == pytest.approx(1518 / 5)
    assert stats.to_dict()["average_score"] == 304


def test_empty_stats():
    stats = SimulationStats.from_scores([])
    assert stats.average_score == 0.0
    assert stats.chest_odds.trials == 0
    assert "0 games" in str(stats)


def test_unknown_preset():
    with pytest.raises(ValueError):
        Simulator("turbo")


def test_presets_build_configs():
    assert set(list_presets()) == {"standard", "quick", "thorough"}
    assert get_preset("Quick").build_config().chest_trials == 8
    assert get_preset("standard").build_config().gold_threshold == 400


def test_preset_object_and_bad_override():
    sim = Simulator(PRESETS["thorough"])
    assert sim.preset_name == "Thorough"
    assert sim.config.chest_trials == 100

    with pytest.raises(ValueError):
        Preset("Broken", "bad option", {"deck_size": 32}).build_config()


def test_preset_overrides_are_validated():
    with pytest.raises(ValueError):
        Simulator(Preset("Big", "six card hands", {"hand_size": 6}), seed=1)
    assert Preset("Small", "three card hands", {"hand_size": 3}).build_config().hand_size == 3


@pytest.mark.slow
def test_batch_statistics_are_stable():
    first = Simulator(seed=2024).run_batch(1000)
    second = Simulator(seed=7).run_batch(1000)

    assert abs(first.average_score - second.average_score) < 15
    for a, b in zip(first.chest_odds.to_dict().values(), second.chest_odds.to_dict().values()):
        if isinstance(a, float):
            assert abs(a - b) < 0.07
