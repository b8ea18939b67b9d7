# aave_sim/analysis/plotting.py

import os

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import seaborn as sns


def format_val(val, width=15) -> str:
    """Formats a value for table printing."""
    if isinstance(val, (int, float)):
        if pd.isna(val):
            s = "N/A"
        elif isinstance(val, int):
            s = f"{val:,}"
        elif abs(val) > 1e7 or (abs(val) < 1e-3 and val != 0):
            s = f"{val:.2e}"
        else:
            s = f"{val:,.2f}"
    else:
        s = str(val)
    return f"{s:<{width}}"


def price_paths_frame(results: list) -> pd.DataFrame:
    """Long format frame of recorded external prices, one row per seed and step."""
    rows = []
    for sim in results:
        for step, (price_a, price_b) in enumerate(sim.uniswap_price_agent[0], start=1):
            rows.append({"seed": sim.seed, "step": step, "price": price_a / price_b})
    return pd.DataFrame(rows, columns=["seed", "step", "price"])


def health_factor_frame(results: list) -> pd.DataFrame:
    """Health factors of indebted accounts as seen by the first liquidator of every run."""
    rows = []
    for sim in results:
        if not sim.liquidation_agents:
            continue
        for step, snapshots in enumerate(sim.liquidation_agents[0], start=1):
            for account, snapshot in enumerate(snapshots):
                if snapshot.total_debt_base > 0:
                    rows.append({"seed": sim.seed, "step": step, "account": account,
                                 "health_factor": snapshot.health_factor})
    return pd.DataFrame(rows, columns=["seed", "step", "account", "health_factor"])


def plot_price_paths(results: list, output_dir: str = ".") -> str:
    """Line plot of the external token A price for every seed."""
    sns.set_theme(style="whitegrid")
    prices_df = price_paths_frame(results)
    path = os.path.join(output_dir, "external_price_paths.png")

    plt.figure(figsize=(12, 7))
    sns.lineplot(data=prices_df, x="step", y="price", hue="seed", palette="viridis", legend=False)
    plt.title("External Market Price of Token A per Seed")
    plt.xlabel("Step"); plt.ylabel("Price (token B)"); plt.tight_layout()
    plt.savefig(path); plt.close()
    return path


def plot_health_factor_distribution(results: list, output_dir: str = ".", upper_clip: float = 3.0) -> str:
    """
    Histogram of recorded health factors, clipped to `upper_clip` so that the
    region around the liquidation boundary stays readable.
    """
    sns.set_theme(style="whitegrid")
    hf_df = health_factor_frame(results)
    path = os.path.join(output_dir, "health_factor_distribution.png")

    plt.figure(figsize=(12, 7))
    if not hf_df.empty:
        clipped = np.clip(hf_df["health_factor"].to_numpy(), 0.0, upper_clip)
        sns.histplot(x=clipped, bins=50, kde=False)
    plt.axvline(1.0, color="red", linestyle="--", label="Liquidation boundary")
    plt.title("Distribution of Recorded Health Factors (All Seeds)")
    plt.xlabel("Health factor"); plt.ylabel("Frequency"); plt.legend(); plt.tight_layout()
    plt.savefig(path); plt.close()
    return path


def plot_liquidations_per_seed(model_results_df: pd.DataFrame, output_dir: str = ".") -> str:
    """Bar plot of executed liquidations at the end of each run."""
    sns.set_theme(style="whitegrid")
    final_df = model_results_df.groupby("seed", as_index=False).last()
    path = os.path.join(output_dir, "liquidations_per_seed.png")

    plt.figure(figsize=(12, 7))
    sns.barplot(data=final_df, x="seed", y="ExecutedLiquidations")
    plt.title("Executed Liquidations per Seed")
    plt.xlabel("Seed"); plt.ylabel("Liquidations"); plt.xticks(rotation=45, ha='right'); plt.tight_layout()
    plt.savefig(path); plt.close()
    return path


def print_run_summary(model_results_df: pd.DataFrame, columns=("PoolPriceA", "MinHealthFactor",
                                                                "ExecutedLiquidations", "FailedTransactions")):
    """Prints the final value of the selected reporters for every seed."""
    final_df = model_results_df.groupby("seed").last()
    header = format_val("Seed", 8) + "".join(format_val(col, 22) for col in columns)
    print("\n" + header)
    print("-" * len(header))
    for seed, row in final_df.iterrows():
        print(format_val(int(seed), 8) + "".join(format_val(row[col], 22) for col in columns))
