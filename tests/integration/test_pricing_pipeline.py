"""
Integration tests: CSV -> loader -> parallel executor -> ranker -> report.
"""

import pytest

from mc_option_pricing.config.settings import SimulationConfig
from mc_option_pricing.data.loader import SyntheticContractProvider, load_contracts
from mc_option_pricing.execution.executor import ParallelExecutor
from mc_option_pricing.options.simulation.monte_carlo import EngineVariant
from mc_option_pricing.ranking.rankings import ResultRanker, rank_results
from mc_option_pricing.ranking.reporting import format_report


@pytest.fixture
def call_and_put_csv(tmp_path):
    """One ATM call and one ATM put."""
    path = tmp_path / "pair.csv"
    path.write_text(
        "symbol,S,K,r,sigma,T,isCall\n"
        "ATM_C,100,100,0.05,0.20,1.0,1\n"
        "ATM_P,100,100,0.05,0.20,1.0,0\n"
    )
    return path


class TestPipeline:
    """Full workflow on the sample file."""

    @pytest.mark.integration
    def test_sample_file(self, options_sample_path) -> None:
        contracts = load_contracts(options_sample_path)
        config = SimulationConfig(n_paths=50_000, n_workers=3, backend="thread")
        run = ParallelExecutor(config).run(contracts)
        ranked = ResultRanker().rank(run.results)

        assert len(ranked) == 8
        returns = [r.expected_return for r in ranked]
        assert returns == sorted(returns, reverse=True)
        for result in run.results:
            assert result.price >= 0.0
            assert abs(result.pricing_error) < 5 * result.standard_error + 1e-6

        report = format_report(run, ranked)
        assert "Top 5 Options:" in report

    @pytest.mark.integration
    def test_sample_file_process_backend(self, options_sample_path) -> None:
        contracts = load_contracts(options_sample_path)
        config = SimulationConfig(n_paths=10_240, n_workers=4, backend="process")
        run = ParallelExecutor(config).run(contracts)

        assert [r.identifier for r in run.results] == [c.identifier for c in contracts]

    @pytest.mark.integration
    @pytest.mark.slow
    def test_call_put_ranking_both_kernels(self, call_and_put_csv) -> None:
        """1M paths, fixed seed: both kernels rank the ATM call above the put."""
        contracts = load_contracts(call_and_put_csv)
        config = SimulationConfig(n_paths=1_000_000, base_seed=12345, n_workers=2, backend="process")

        orders = {}
        for variant in EngineVariant:
            run = ParallelExecutor(config).run(contracts, variant=variant)
            orders[variant] = [r.identifier for r in rank_results(run.results)]

            call, put = run.results
            assert abs(call.price - call.analytic_price) / call.analytic_price < 0.01
            assert abs(put.price - put.analytic_price) / put.analytic_price < 0.01

        assert orders[EngineVariant.REFERENCE] == orders[EngineVariant.BATCHED] == ["ATM_C", "ATM_P"]

    @pytest.mark.integration
    def test_synthetic_batch(self) -> None:
        with pytest.warns(UserWarning):
            contracts = SyntheticContractProvider(seed=7).generate_contracts(40)

        config = SimulationConfig(n_paths=4_096, n_workers=6, backend="thread")
        run = ParallelExecutor(config).run(contracts)
        top = ResultRanker().top(run.results, n=5)

        assert len(top) == 5
        assert top[0].expected_return == max(r.expected_return for r in run.results)

    @pytest.mark.integration
    def test_worker_count_does_not_change_batch_size(self, options_sample_path) -> None:
        """Partitioning changes seeds, never which contracts are priced."""
        contracts = load_contracts(options_sample_path)
        runs = [
            ParallelExecutor(SimulationConfig(n_paths=2_048, n_workers=w, backend="thread")).run(
                contracts
            )
            for w in (1, 3, 8, 20)
        ]
        for run in runs:
            assert [r.identifier for r in run.results] == [c.identifier for c in contracts]
