import matplotlib.pyplot as plt
import numpy as np

from .logger import CodingLog, SymbolCodeLog


class PerformanceDisplay:
    def __init__(self, logs,
                 fig_size=(10, 6), dpi=100, font_size=12,
                 dot_size=5, dot_alpha=0.3,
                 dot_color='blue',
                 trend_line_color='red', trend_line_linewidth=2,
                 moving_avg_window=10):
        self.logs = logs
        self.fig_size = fig_size
        self.dpi = dpi
        self.font_size = font_size
        self.dot_size = dot_size
        self.dot_alpha = dot_alpha
        self.dot_color = dot_color
        self.trend_line_color = trend_line_color
        self.trend_line_linewidth = trend_line_linewidth
        self.moving_avg_window = moving_avg_window

    def _moving_average(self, data):
        window = self.moving_avg_window
        if window < 1:
            raise ValueError("moving_avg_window must be at least 1")
        # 'same' mode returns max(len(data), window) points
        window = min(window, len(data))
        return np.convolve(data, np.ones(window) / window, mode='same')

    def _finish(self, show_graph, save_path):
        plt.grid(True)
        plt.legend(fontsize=self.font_size)
        plt.tight_layout()
        if save_path:
            plt.savefig(save_path)
        if show_graph:
            plt.show()
        plt.close()

    def generate_encoded_size_plot(self, show_graph=False, save_path=None):
        """
        Scatter the number of bits each encoded symbol took, with a moving
        average trend line.

        Returns:
            bool: False when there were no coding logs to plot.
        """
        values = [log.encoded_size for log in self.logs if isinstance(log, CodingLog)]
        if not values:
            print("No data available for Encoded Symbol Size.")
            return False

        x = np.arange(1, len(values) + 1)
        y = np.array(values)
        trend = self._moving_average(y)

        plt.figure(figsize=self.fig_size, dpi=self.dpi)
        plt.scatter(x, y, s=self.dot_size, alpha=self.dot_alpha, color=self.dot_color, label="Data points")
        plt.plot(x, trend, color=self.trend_line_color, linewidth=self.trend_line_linewidth, label="Moving Average Trend")
        plt.title("Encoded Symbol Size", fontsize=self.font_size + 2)
        plt.xlabel("Symbol Order", fontsize=self.font_size)
        plt.ylabel("Bits", fontsize=self.font_size)
        self._finish(show_graph, save_path)
        return True

    def generate_code_length_plot(self, show_graph=False, save_path=None):
        """
        Plot the code length of every symbol against its frequency.

        Returns:
            bool: False when there were no symbol code logs to plot.
        """
        entries = [log for log in self.logs if isinstance(log, SymbolCodeLog)]
        if not entries:
            print("No data available for Code Length by Frequency.")
            return False

        frequencies = np.array([log.frequency for log in entries])
        lengths = np.array([len(log.code) for log in entries])
        order = np.argsort(frequencies)

        plt.figure(figsize=self.fig_size, dpi=self.dpi)
        plt.scatter(frequencies, lengths, s=self.dot_size * 4, color=self.dot_color, label="Symbols")
        plt.plot(frequencies[order], lengths[order], color=self.trend_line_color,
                 linewidth=self.trend_line_linewidth, label="Code length")
        plt.xscale('log')
        plt.title("Code Length by Frequency", fontsize=self.font_size + 2)
        plt.xlabel("Frequency", fontsize=self.font_size)
        plt.ylabel("Code Length (bits)", fontsize=self.font_size)
        self._finish(show_graph, save_path)
        return True
