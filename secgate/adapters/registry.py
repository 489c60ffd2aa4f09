"""이 파일은 .py 어댑터 레지스트리 모듈로 스캐너 등록 순서를 관리합니다."""

from typing import Dict, Iterator, List

from secgate.scanners.base import ScannerAdapter


class AdapterRegistry:
    def __init__(self) -> None:
        # 등록 순서가 곧 설치/스캔 순서이다.
        self._adapters: Dict[str, ScannerAdapter] = {}

    def register(self, adapter: ScannerAdapter) -> None:
        if adapter.name in self._adapters:
            raise KeyError(f"Adapter already registered: {adapter.name}")
        self._adapters[adapter.name] = adapter

    def names(self) -> List[str]:
        return list(self._adapters)

    def __iter__(self) -> Iterator[ScannerAdapter]:
        return iter(list(self._adapters.values()))

    def __len__(self) -> int:
        return len(self._adapters)
