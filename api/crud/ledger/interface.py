from abc import ABC, abstractmethod


class LedgerInterface(ABC):
    @abstractmethod
    async def add_entry():
        pass

    @abstractmethod
    async def get_entry():
        pass

    @abstractmethod
    async def list_for_partner():
        pass

    @abstractmethod
    async def totals_for_partner():
        pass

    @abstractmethod
    async def lock_partner():
        pass
