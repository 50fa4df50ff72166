"""의존성 주입 컨테이너"""
from typing import Any, Callable, Dict, Type, TypeVar


T = TypeVar('T')

class DIContainer:
    """간단한 의존성 주입 컨테이너

    싱글톤 인스턴스와 지연 생성 팩토리를 인터페이스 타입 기준으로 보관한다.
    팩토리로 만든 인스턴스는 최초 조회 시 한 번만 생성되어 캐싱된다.
    """

    def __init__(self):
        self._singletons: Dict[Type, Any] = {}
        self._factories: Dict[Type, Callable[[], Any]] = {}

    def register_singleton(self, interface: Type[T], implementation: T) -> None:
        """싱글톤 인스턴스 등록"""
        self._singletons[interface] = implementation

    def register_factory(self, interface: Type[T], factory_func: Callable[[], T]) -> None:
        """지연 생성 팩토리 등록 (최초 조회 시 1회 생성)"""
        self._factories[interface] = factory_func
        self._singletons.pop(interface, None)

    def has(self, interface: Type) -> bool:
        """등록 여부 확인"""
        return interface in self._singletons or interface in self._factories

    def get(self, interface: Type[T]) -> T:
        """서비스 인스턴스 조회"""
        if interface in self._singletons:
            return self._singletons[interface]

        if interface in self._factories:
            instance = self._factories[interface]()
            self._singletons[interface] = instance
            return instance

        interface_name = getattr(interface, "__name__", repr(interface))
        raise ValueError(f"Service {interface_name} not registered")

# 전역 컨테이너 인스턴스
container = DIContainer()
