"""
logger.py

Logging module for huffcodec.


"""


from datetime import datetime
from typing import Any, Optional, Union

class LogLevel:
    INFO = 0
    WARNING = 1
    ERROR = 2
    PROGRESS = 3


class Log:
    def __init__(self, type_name: str, level: int, message: str) -> None:
        self.level = level
        self.type_name = type_name
        self.message = message
        self.date = datetime.now()

    def __str__(self) -> str:
        return f"{self.date} - {self.type_name} - {self.level} - {self.message}"

    def __repr__(self) -> str:
        return self.__str__()


class CodingLog(Log):
    def __init__(self, symbol_size: int, encoded_size: int) -> None:
        self.symbol_size = symbol_size
        self.encoded_size = encoded_size
        super().__init__("Coding_log", LogLevel.INFO, f"Symbol size: {symbol_size}, Encoded size: {encoded_size}")


class SymbolCodeLog(Log):
    def __init__(self, symbol: Any, frequency: int, code: str) -> None:
        self.symbol = symbol
        self.frequency = frequency
        self.code = code
        super().__init__("Symbol_code_log", LogLevel.INFO, f"Symbol: {symbol}, Frequency: {frequency}, Code: {code}")


class TreeBuildLog(Log):
    def __init__(self, leaf_count: int, internal_count: int, depth: int) -> None:
        self.leaf_count = leaf_count
        self.internal_count = internal_count
        self.depth = depth
        super().__init__("Tree_build_log", LogLevel.INFO,
                         f"Leaves: {leaf_count}, Internal nodes: {internal_count}, Depth: {depth}")


class CompressionSummaryLog(Log):
    def __init__(self, stats: Any) -> None:
        self.stats = stats
        super().__init__("Compression_summary_log", LogLevel.INFO, str(stats))


class PreprocessingProgressStep(Log):
    def __init__(self, message: str, total_steps: Optional[int] = None) -> None:
        self.base_message = message
        self.total_steps = total_steps
        super().__init__("Preprocessing_progress_step", LogLevel.PROGRESS, message)


class CodingProgressStep(Log):
    def __init__(self, message: str, total_steps: Optional[int] = None) -> None:
        self.base_message = message
        self.total_steps = total_steps
        super().__init__("Coding_progress_step", LogLevel.PROGRESS, message)


class Logger:
    def __init__(self) -> None:
        self.preproc_progress_count = 0
        self.coding_progress_count = 0

        self.logs = []

        self.record_info = True
        self.record_warning = True
        self.record_error = True
        self.record_progress = False

        self.display_info = False
        self.display_warning = True
        self.display_error = True
        self.display_progress = True

        self.save_info = True
        self.save_warning = True
        self.save_error = True
        self.save_progress = False

        self.preprocessor_step_interval_count = 10000
        self.coding_step_interval_count = 1000

    def log(self, log: Union[Log, str]) -> None:
        if not (isinstance(log, Log) or isinstance(log, str)):
            raise ValueError("Log must be an instance of Log class or a string")
        if isinstance(log, str):
            log = Log("General", LogLevel.INFO, log)

        if log.level == LogLevel.INFO:
            self._handle(log, self.record_info, self.display_info)
        elif log.level == LogLevel.WARNING:
            self._handle(log, self.record_warning, self.display_warning)
        elif log.level == LogLevel.ERROR:
            self._handle(log, self.record_error, self.display_error)
        elif log.level == LogLevel.PROGRESS:
            if isinstance(log, PreprocessingProgressStep):
                self.preproc_progress_count += 1
                count = self.preproc_progress_count
                interval = self.preprocessor_step_interval_count
            elif isinstance(log, CodingProgressStep):
                self.coding_progress_count += 1
                count = self.coding_progress_count
                interval = self.coding_step_interval_count
            else:
                raise ValueError(f"Unknown progress log type: {log.type_name}")
            if log.total_steps is not None:
                log.message = f"{log.base_message} ({count}/{log.total_steps})"
            else:
                log.message = f"{log.base_message} ({count})"
            show = count % interval == 0 or count == log.total_steps
            self._handle(log, self.record_progress, self.display_progress and show)

    def _handle(self, log: Log, record: bool, display: bool) -> None:
        if record:
            self.logs.append(log)
        if display:
            print(log)

    def reset_progress(self) -> None:
        self.preproc_progress_count = 0
        self.coding_progress_count = 0

    def get_logs(self, log_type: Optional[type] = None) -> list:
        if log_type is None:
            return list(self.logs)
        return [log for log in self.logs if isinstance(log, log_type)]

    def clear_logs(self) -> None:
        self.logs = []

    def _should_save(self, log: Log) -> bool:
        if log.level == LogLevel.INFO:
            return self.save_info
        if log.level == LogLevel.WARNING:
            return self.save_warning
        if log.level == LogLevel.ERROR:
            return self.save_error
        return self.save_progress

    def save(self, file_path: str) -> None:
        with open(file_path, 'w') as file:
            for log in self.logs:
                if self._should_save(log):
                    file.write(str(log) + "\n")
