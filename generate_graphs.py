import matplotlib.pyplot as plt

from simulator import run_all

METRICS = ['page_faults', 'write_backs', 'disk_accesses']
TITLES = ['Page Faults', 'Write Backs', 'Disk Accesses']


def plot_comparison(results, output_path='algorithm_comparison.png'):
    """Bar chart of every metric for each algorithm in ``results``."""
    algorithms = list(results)

    fig, axes = plt.subplots(1, len(METRICS), figsize=(15, 5))
    fig.suptitle('Page Replacement Algorithm Comparison', fontsize=14,
                 fontweight='bold')

    for ax, metric, title in zip(axes, METRICS, TITLES):
        values = [getattr(results[alg], metric) for alg in algorithms]
        x = range(len(algorithms))
        bars = ax.bar(x, values, 0.6)

        for bar in bars:
            height = bar.get_height()
            ax.text(bar.get_x() + bar.get_width()/2., height,
                    f'{int(height)}', ha='center', va='bottom', fontsize=9)

        ax.set_title(title)
        ax.set_xticks(list(x))
        ax.set_xticklabels(algorithms, rotation=30)
        ax.grid(axis='y', alpha=0.3)

    plt.tight_layout()
    fig.savefig(output_path, dpi=300, bbox_inches='tight')
    return fig


if __name__ == '__main__':
    print("Running simulations...")
    plot_comparison(run_all(random_seed=42))
    print("\nGraph saved as 'algorithm_comparison.png'")
    plt.show()
