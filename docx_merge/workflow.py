#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
标准文档合并工作流程
Document Merge Standard Workflow

将多个 .docx 文档按给定顺序合并为一个文档,每个源文档以 altChunk
方式原样嵌入,保留其样式、图片、表格和域:
- 生成带占位段落的宿主骨架文档
- 解包骨架文档
- 嵌入每个源文档并改写 [Content_Types].xml、关系文件和正文
- 打包为 .docx 并做结构校验

使用示例:
    from docx_merge.workflow import merge, merge_documents

    data = merge([(a_bytes, 0, "a.docx"), (b_bytes, 1, "b.docx")])
    merge_documents(["a.docx", "b.docx"], "合并文档.docx")
"""

from __future__ import annotations

import argparse
import logging
import sys
import zipfile
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

from .document import EmbeddedChunk, HostDocument, InputDocument
from .error_handling import (
    EmptyInputError,
    InvalidInputError,
    MergeBatchLogger,
    MergeError,
    PackagingError,
    format_file_size,
)
from .logger import get_logger
from .ooxml.pack import pack_document
from .ooxml.unpack import unpack_document
from .ooxml.validation import AltChunkValidator
from .skeleton_renderer import DEFAULT_PAGE_BREAKS, DEFAULT_UPDATE_FIELDS, render_skeleton_docx

LOGGER = get_logger(__name__)

DOCX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
DEFAULT_VALIDATE = True
DEFAULT_OUTPUT_TEMPLATE = "合并文档_{timestamp}.docx"

InputLike = Union[InputDocument, Tuple[bytes, int, str]]


@dataclass(frozen=True)
class MergedPackage:
    """The finished package plus where each input was embedded."""

    data: bytes
    chunks: List[EmbeddedChunk] = field(default_factory=list)
    mime_type: str = DOCX_MIME_TYPE

    @property
    def size(self) -> int:
        return len(self.data)


def normalize_inputs(inputs: Iterable[InputLike]) -> List[InputDocument]:
    """
    Coerce inputs to ``InputDocument`` and order them by ordinal.

    Ordinals must be exactly 0..N-1.
    """
    documents = []
    for item in inputs:
        if isinstance(item, InputDocument):
            documents.append(item)
        else:
            data, index, name = item
            documents.append(InputDocument(data=bytes(data), index=index, name=name))

    if not documents:
        raise EmptyInputError("No documents supplied to merge")

    documents.sort(key=lambda doc: doc.index)
    indices = [doc.index for doc in documents]
    if indices != list(range(len(documents))):
        raise InvalidInputError(f"Input ordinals must be 0..{len(documents) - 1}, got {indices}")
    return documents


class DocxMergeWorkflow:
    """
    完整的文档合并工作流程

    每一步失败都会抛出 MergeError 子类,整个合并中止,不返回任何部分结果。
    """

    def __init__(
        self,
        inputs: Iterable[InputLike],
        page_breaks: bool = DEFAULT_PAGE_BREAKS,
        update_fields: bool = DEFAULT_UPDATE_FIELDS,
        validate: bool = DEFAULT_VALIDATE,
    ):
        """
        初始化工作流程

        Args:
            inputs: 待合并文档,InputDocument 或 (bytes, 序号, 名称) 元组
            page_breaks: 是否在文档之间插入分页符(默认True)
            update_fields: 打开时是否提示更新域(默认True)
            validate: 打包后是否做结构校验(默认True)
        """
        self.documents = normalize_inputs(inputs)
        self.page_breaks = page_breaks
        self.update_fields = update_fields
        self.validate = validate
        self.batch_logger = MergeBatchLogger()
        self.chunks: List[EmbeddedChunk] = []

    def step1_build_skeleton(self) -> bytes:
        """步骤1: 生成带占位段落的宿主骨架文档"""
        skeleton = render_skeleton_docx(
            len(self.documents),
            page_breaks=self.page_breaks,
            update_fields=self.update_fields,
        )
        LOGGER.debug("Skeleton built: %s", format_file_size(len(skeleton)))
        return skeleton

    def step2_unpack(self, skeleton: bytes) -> Dict[str, bytes]:
        """步骤2: 解包骨架文档"""
        try:
            return unpack_document(skeleton)
        except zipfile.BadZipFile as exc:
            raise PackagingError(f"Host package is not a valid zip archive: {exc}") from exc

    def step3_embed(self, parts: Dict[str, bytes]) -> Dict[str, bytes]:
        """步骤3: 嵌入源文档并改写三个交叉引用部件"""
        with HostDocument(parts) as host:
            for document in self.documents:
                try:
                    chunk = host.embed(document)
                except MergeError as exc:
                    self.batch_logger.log_failure(document.name, exc)
                    raise
                self.chunks.append(chunk)
                self.batch_logger.log_success(chunk.index, chunk.name, chunk.r_id, chunk.size)

            LOGGER.debug("Chunk verification: %s", host.verify_chunks())
            return host.save()

    def step4_pack(self, parts: Dict[str, bytes]) -> bytes:
        """步骤4: 打包为 .docx (deflate 压缩)"""
        try:
            return pack_document(parts)
        except (ValueError, OSError, MemoryError, zipfile.LargeZipFile) as exc:
            raise PackagingError(f"Could not write merged package: {exc}") from exc

    def step5_validate(self, data: bytes) -> None:
        """步骤5: 校验 altChunk 引用的完整性"""
        try:
            parts = unpack_document(data)
        except zipfile.BadZipFile as exc:
            raise PackagingError(f"Merged package is not a valid zip archive: {exc}") from exc

        validator = AltChunkValidator(
            parts,
            expected_count=len(self.documents),
            require_update_fields=self.update_fields,
        )
        if not validator.validate():
            raise PackagingError(f"Merged package failed validation: {validator.errors}")

    def run(self) -> MergedPackage:
        LOGGER.info("Merging %d document(s)", len(self.documents))
        skeleton = self.step1_build_skeleton()
        parts = self.step2_unpack(skeleton)
        parts = self.step3_embed(parts)
        data = self.step4_pack(parts)
        if self.validate:
            self.step5_validate(data)
        LOGGER.info("Merged package ready (%s)", format_file_size(len(data)))
        return MergedPackage(data=data, chunks=list(self.chunks))


def merge(inputs: Iterable[InputLike], **options) -> bytes:
    """
    Merge ordered inputs into one .docx and return its bytes.

    ``options`` are passed to :class:`DocxMergeWorkflow`.
    """
    return DocxMergeWorkflow(inputs, **options).run().data


def merge_documents(
    paths: Sequence[Union[str, Path]],
    output_path: Union[str, Path],
    **options,
) -> Path:
    """
    Merge .docx files in the given order and write the result.

    The output file is only written once the whole merge succeeded.
    """
    documents = [InputDocument.from_path(path, index) for index, path in enumerate(paths)]
    package = DocxMergeWorkflow(documents, **options).run()

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_bytes(package.data)
    return output_path


def default_output_name(now: Optional[datetime] = None) -> str:
    timestamp = (now or datetime.now()).strftime("%Y%m%d%H%M")
    return DEFAULT_OUTPUT_TEMPLATE.format(timestamp=timestamp)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Merge .docx files in order, embedding each one unchanged")
    parser.add_argument("inputs", nargs="+", help="Input .docx files, merged in the order given")
    parser.add_argument("-o", "--output", help="Output .docx file (default: 合并文档_<timestamp>.docx)")
    parser.add_argument("--no-page-breaks", action="store_true", help="Do not start each document on a new page")
    parser.add_argument("--no-update-fields", action="store_true", help="Do not ask Word to update fields on open")
    parser.add_argument("--no-validate", action="store_true", help="Skip structural validation of the result")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    args = parser.parse_args(argv)

    if args.verbose:
        get_logger(__package__).setLevel(logging.DEBUG)

    paths = [Path(name) for name in args.inputs]
    for path in paths:
        if not path.is_file():
            print(f"✗ 文件不存在: {path}", file=sys.stderr)
            return 1
        if path.suffix.lower() != ".docx":
            print(f"✗ 仅支持 .docx 格式: {path.name}", file=sys.stderr)
            return 1

    output_path = Path(args.output) if args.output else Path(default_output_name())
    try:
        documents = [InputDocument.from_path(path, index) for index, path in enumerate(paths)]
    except OSError as exc:
        print(f"✗ 无法读取文件: {exc}", file=sys.stderr)
        return 1

    workflow = DocxMergeWorkflow(
        documents,
        page_breaks=not args.no_page_breaks,
        update_fields=not args.no_update_fields,
        validate=not args.no_validate,
    )
    try:
        package = workflow.run()
    except MergeError as exc:
        print(f"✗ 合并失败 [{exc.kind}]: {exc}", file=sys.stderr)
        print(workflow.batch_logger.generate_summary(), file=sys.stderr)
        return 1

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_bytes(package.data)

    print(workflow.batch_logger.generate_summary())
    print(f"✓ 文档已打包: {output_path} ({format_file_size(package.size)})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
