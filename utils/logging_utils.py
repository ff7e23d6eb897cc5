# -*- coding: utf-8 -*-
"""
日志工具

提供日志记录和管理功能
包括彩色控制台输出、滚动日志文件与统一的初始化入口
"""

import logging
import logging.handlers
import os
import sys
from typing import Dict, List, Optional, Union

import colorama
from colorama import Back, Fore, Style

# 初始化colorama
colorama.init()

DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DEFAULT_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


class ColoredFormatter(logging.Formatter):
    """
    彩色日志格式化器

    为不同级别的日志添加颜色
    """

    # 颜色映射
    COLORS = {
        'DEBUG': Fore.CYAN,
        'INFO': Fore.GREEN,
        'WARNING': Fore.YELLOW,
        'ERROR': Fore.RED,
        'CRITICAL': Fore.RED + Back.WHITE + Style.BRIGHT
    }

    def __init__(self, fmt=None, datefmt=None, use_colors=True):
        """
        初始化彩色格式化器

        Args:
            fmt (str): 日志格式
            datefmt (str): 日期格式
            use_colors (bool): 是否使用颜色
        """
        super().__init__(fmt, datefmt)
        self.use_colors = use_colors

    def format(self, record):
        log_message = super().format(record)

        # 仅在终端中着色
        if self.use_colors and sys.stderr.isatty():
            color = self.COLORS.get(record.levelname)
            if color:
                log_message = f"{color}{log_message}{Style.RESET_ALL}"

        return log_message


def _to_level(level: Union[str, int]) -> int:
    if isinstance(level, str):
        return getattr(logging, level.upper())
    return level


class LogManager:
    """
    日志管理器

    统一创建处理器并挂载到日志记录器
    """

    def __init__(self):
        self.handlers: Dict[str, logging.Handler] = {}
        self.loggers: Dict[str, logging.Logger] = {}

    def create_console_handler(self, name: str = 'console',
                               level: Union[str, int] = 'INFO',
                               use_colors: bool = True,
                               format_string: Optional[str] = None) -> logging.Handler:
        """
        创建控制台处理器

        Args:
            name (str): 处理器名称
            level: 日志级别
            use_colors (bool): 是否使用颜色
            format_string (str, optional): 日志格式

        Returns:
            logging.Handler: 控制台处理器
        """
        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(_to_level(level))
        handler.setFormatter(ColoredFormatter(format_string or DEFAULT_FORMAT,
                                              DEFAULT_DATE_FORMAT, use_colors))
        self.handlers[name] = handler
        return handler

    def create_file_handler(self, name: str, file_path: str,
                            level: Union[str, int] = 'DEBUG',
                            max_bytes: int = 5 * 1024 * 1024,
                            backup_count: int = 3) -> Optional[logging.Handler]:
        """
        创建滚动文件处理器

        Args:
            name (str): 处理器名称
            file_path (str): 日志文件路径
            level: 日志级别
            max_bytes (int): 单个文件最大字节数
            backup_count (int): 保留的备份数

        Returns:
            logging.Handler: 文件处理器，目录无法创建时返回 None
        """
        try:
            os.makedirs(os.path.dirname(file_path) or '.', exist_ok=True)
            handler = logging.handlers.RotatingFileHandler(
                file_path, maxBytes=max_bytes, backupCount=backup_count, encoding='utf-8'
            )
        except OSError as e:
            print(f"Error creating file handler {name}: {str(e)}", file=sys.stderr)
            return None

        handler.setLevel(_to_level(level))
        handler.setFormatter(logging.Formatter(DEFAULT_FORMAT, DEFAULT_DATE_FORMAT))
        self.handlers[name] = handler
        return handler

    def create_logger(self, name: str, level: Union[str, int] = 'INFO',
                      handlers: Optional[List[str]] = None) -> logging.Logger:
        """
        创建日志记录器

        Args:
            name (str): 日志记录器名称（空字符串表示根记录器）
            level: 日志级别
            handlers (List[str], optional): 处理器名称列表

        Returns:
            logging.Logger: 日志记录器
        """
        logger = logging.getLogger(name)
        logger.setLevel(_to_level(level))

        for handler_name in handlers or []:
            handler = self.handlers.get(handler_name)
            if handler is not None and handler not in logger.handlers:
                logger.addHandler(handler)

        self.loggers[name] = logger
        return logger

    def setup_default_logging(self, log_dir: str = 'logs',
                              app_name: str = 'fillable_loader',
                              console_level: str = 'INFO',
                              file_level: str = 'DEBUG',
                              use_colors: bool = True,
                              log_to_file: bool = True) -> logging.Logger:
        """
        设置默认日志配置

        处理器挂载在根记录器上，各模块通过 logging.getLogger(__name__) 输出

        Args:
            log_dir (str): 日志目录
            app_name (str): 应用名称
            console_level (str): 控制台日志级别
            file_level (str): 文件日志级别
            use_colors (bool): 是否使用颜色
            log_to_file (bool): 是否写入日志文件

        Returns:
            logging.Logger: 应用日志记录器
        """
        handler_names = ['console']
        self.create_console_handler('console', console_level, use_colors)

        if log_to_file:
            log_file = os.path.join(log_dir, f'{app_name}.log')
            if self.create_file_handler('file', log_file, file_level) is not None:
                handler_names.append('file')

        self.create_logger('', 'DEBUG', handler_names)
        return logging.getLogger(app_name)

    def close_all_handlers(self):
        """关闭全部处理器"""
        for logger in self.loggers.values():
            for handler in list(logger.handlers):
                if handler in self.handlers.values():
                    logger.removeHandler(handler)
        for handler in self.handlers.values():
            handler.close()
        self.handlers.clear()


_log_manager = LogManager()


# 便捷函数
def setup_logging(log_dir: str = 'logs', app_name: str = 'fillable_loader',
                  console_level: str = 'INFO', file_level: str = 'DEBUG',
                  use_colors: bool = True, log_to_file: bool = True) -> logging.Logger:
    """
    快速设置日志配置

    重复调用时替换之前挂载的处理器

    Args:
        log_dir (str): 日志目录
        app_name (str): 应用名称
        console_level (str): 控制台日志级别
        file_level (str): 文件日志级别
        use_colors (bool): 是否使用颜色
        log_to_file (bool): 是否写入日志文件

    Returns:
        logging.Logger: 应用日志记录器
    """
    _log_manager.close_all_handlers()
    return _log_manager.setup_default_logging(
        log_dir, app_name, console_level, file_level, use_colors, log_to_file
    )
