#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
可填充加载动画
主程序入口

先描出猫咪轮廓，再以波浪形状从下往上填充；
支持导出 GIF / MP4 / PNG 序列、交互式预览与进度曲线
"""

import sys
import argparse
import json
import time
from pathlib import Path

# 添加项目根目录到Python路径
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from config.settings import Config
from core.animation import AnimationRenderer, FillableLoader, RenderFormat
from utils.logging_utils import setup_logging
from utils.visualization import ColorUtils, plot_animation_progress


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='可填充加载动画')
    parser.add_argument('--config', '-c', help='YAML 配置文件路径')
    parser.add_argument('--output', '-o', help='输出路径（frames 格式时为目录）')
    parser.add_argument('--format', '-f', choices=[f.value for f in RenderFormat], help='输出格式')
    parser.add_argument('--width', type=int, help='画布宽度')
    parser.add_argument('--height', type=int, help='画布高度')
    parser.add_argument('--fps', type=int, help='帧率')
    parser.add_argument('--stroke-color', help='描边颜色（#RRGGBB 或颜色名称）')
    parser.add_argument('--fill-color', help='填充颜色（#RRGGBB 或颜色名称）')
    parser.add_argument('--stroke-duration', type=int, help='描边时长（毫秒）')
    parser.add_argument('--fill-duration', type=int, help='填充时长（毫秒）')
    parser.add_argument('--preview', action='store_true', help='打开预览窗口')
    parser.add_argument('--plot', help='保存进度曲线图片的路径')
    parser.add_argument('--debug', action='store_true', help='调试模式')
    return parser


def apply_arguments(config: Config, args: argparse.Namespace):
    """
    用命令行参数覆盖配置

    Args:
        config: 配置
        args: 命令行参数
    """
    overrides = [
        ('render', 'output_path', args.output),
        ('render', 'format', args.format),
        ('render', 'fps', args.fps),
        ('canvas', 'width', args.width),
        ('canvas', 'height', args.height),
        ('loader', 'stroke_color', args.stroke_color),
        ('loader', 'fill_color', args.fill_color),
        ('loader', 'stroke_duration_millis', args.stroke_duration),
        ('loader', 'fill_duration_millis', args.fill_duration),
    ]
    for section, key, value in overrides:
        if value is not None:
            config.set(section, key, value)

    # 只指定格式时按格式推导默认输出路径
    if args.format and not args.output:
        default_outputs = {'gif': 'output/loader.gif', 'mp4': 'output/loader.mp4',
                           'frames': 'output/frames'}
        config.set('render', 'output_path', default_outputs[args.format])

    if args.debug:
        config.set('logging', 'console_level', 'DEBUG')


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    config = Config(args.config)
    apply_arguments(config, args)

    log_config = config.get('logging')
    logger = setup_logging(**log_config)

    try:
        loader_config = config.loader_config()
        render_config = config.render_config()
    except ValueError as e:
        print(f"错误: {str(e)}")
        return 1

    print("=" * 60)
    print("可填充加载动画")
    print("=" * 60)
    print(f"描边颜色: {ColorUtils.to_hex(loader_config.stroke_color)}")
    print(f"填充颜色: {ColorUtils.to_hex(loader_config.fill_color)}")
    print(f"描边时长: {loader_config.stroke_duration_millis} ms")
    print(f"填充时长: {loader_config.fill_duration_millis} ms")
    print(f"画布尺寸: {render_config.resolution[0]}x{render_config.resolution[1]}")
    print(f"动画帧率: {render_config.fps} fps")
    print(f"调试模式: {args.debug}")
    print("=" * 60)

    if args.preview:
        # 按需导入图形界面
        from ui.main_window import run_preview
        return run_preview(loader_config, render_config.fps)

    try:
        if args.plot:
            plot_animation_progress(FillableLoader.from_config(loader_config), args.plot)

        print(f"\n渲染 {render_config.format.value} 中...")
        start_time = time.time()
        loader = FillableLoader.from_config(loader_config)
        result = AnimationRenderer().render(loader, render_config)
        render_time = time.time() - start_time

        if not result.success:
            print(f"错误: 渲染失败 {result.error_message}")
            return 1

        stats = {
            'render_time': render_time,
            'total_frames': result.total_frames,
            'file_size': result.file_size,
            'frame_stats': loader.stats.summary(),
        }
        logger.debug(f"Render statistics: {json.dumps(stats, ensure_ascii=False)}")
        loader.close()

        print("\n" + "=" * 60)
        print("渲染完成！")
        print(f"总帧数: {result.total_frames}")
        print(f"总耗时: {render_time:.2f}s")
        print(f"输出文件: {result.output_path}")
        if args.plot:
            print(f"进度曲线: {args.plot}")
        print("=" * 60)

    except Exception as e:
        logger.error(f"Unexpected error: {str(e)}")
        if args.debug:
            import traceback
            traceback.print_exc()
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
