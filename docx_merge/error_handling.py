#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
错误处理和合并报告工具
Error Handling and Merge Report Utilities

提供统一的异常类型、错误摘要格式化和批量合并日志记录。
"""

from __future__ import annotations

import traceback
from datetime import datetime
from typing import Dict, List, Optional


# ==================== 自定义异常类 ====================

class MergeError(Exception):
    """文档合并基础异常类"""

    kind = "MergeFailure"


class EmptyInputError(MergeError):
    """未提供任何待合并文档"""

    kind = "EmptyInput"


class InvalidInputError(MergeError):
    """输入序号不连续或重复"""

    kind = "InvalidInput"


class SkeletonConstructionError(MergeError):
    """宿主骨架文档生成失败"""

    kind = "SkeletonConstructionFailure"


class MalformedSkeletonError(MergeError):
    """骨架文档缺少必需部件或XML无法解析"""

    kind = "MalformedSkeleton"


class MarkerNotFoundError(MergeError):
    """占位段落未找到"""

    kind = "MarkerNotFound"

    def __init__(self, index: int, marker: str):
        super().__init__(f"Placeholder paragraph not found for input #{index}: {marker}")
        self.index = index
        self.marker = marker


class PackagingError(MergeError):
    """最终文档打包失败"""

    kind = "PackagingFailure"


# ==================== 错误格式化 ====================

def format_error_summary(errors: List[Dict]) -> str:
    """
    格式化错误摘要为可读文本

    Args:
        errors: 错误列表,每个错误包含 kind, name, message 等字段

    Returns:
        str: 格式化的错误摘要文本

    Example:
        >>> errors = [{"kind": "MarkerNotFound", "name": "b.docx", "message": "..."}]
        >>> print(format_error_summary(errors))
    """
    if not errors:
        return "✓ 无错误"

    lines = [f"✗ 发现 {len(errors)} 个错误:"]
    for i, error in enumerate(errors, 1):
        lines.append(f"\n{i}. {error.get('kind', 'Unknown Error')}")
        lines.append(f"   文件: {error.get('name', 'N/A')}")
        lines.append(f"   原因: {error.get('message', 'N/A')}")
    return "\n".join(lines)


def format_file_size(size: int) -> str:
    """Human-readable byte count (B / KB / MB)."""
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"


# ==================== 合并批处理日志记录器 ====================

class MergeBatchLogger:
    """
    合并批处理日志记录器

    记录每个输入文档的嵌入结果,并生成执行报告。

    Attributes:
        successful: 成功嵌入的文档列表
        failed: 失败记录列表
        start_time: 开始时间

    Example:
        >>> batch = MergeBatchLogger()
        >>> batch.log_success(0, "a.docx", "rIdAltChunk0", 10240)
        >>> print(batch.generate_summary())
    """

    def __init__(self):
        self.successful = []
        self.failed = []
        self.start_time = datetime.now()

    def log_success(self, index: int, name: str, r_id: str, size: int) -> None:
        self.successful.append({
            'index': index,
            'name': name,
            'r_id': r_id,
            'size': size,
            'timestamp': datetime.now(),
        })

    def log_failure(self, name: Optional[str], error: Exception) -> None:
        self.failed.append({
            'name': name,
            'kind': getattr(error, 'kind', type(error).__name__),
            'message': str(error),
            'traceback': traceback.format_exc(),
            'timestamp': datetime.now(),
        })

    def get_statistics(self) -> Dict:
        total = len(self.successful) + len(self.failed)
        return {
            'total': total,
            'successful': len(self.successful),
            'failed': len(self.failed),
            'total_size': sum(item['size'] for item in self.successful),
            'duration': (datetime.now() - self.start_time).total_seconds(),
        }

    def generate_summary(self) -> str:
        stats = self.get_statistics()
        lines = [
            f"合并文档: {stats['successful']}/{stats['total']}",
            f"总大小: {format_file_size(stats['total_size'])}",
            f"耗时: {stats['duration']:.2f}s",
        ]
        for item in self.successful:
            lines.append(
                f"  ✓ [{item['index']}] {item['name']} -> {item['r_id']} "
                f"({format_file_size(item['size'])})"
            )
        if self.failed:
            lines.append(format_error_summary(self.failed))
        return "\n".join(lines)
