"""Pantry aggregate: names of items the user always keeps on hand.

Membership only, no quantities. A recipe ingredient whose normalized name is in
the pantry is reported as "already have" instead of going onto the list.
"""
from typing import Iterable, List

from grocer.logic.shopping.normalization import normalize_item_name
from grocer.utilities.validators import PantryItemInput


class Pantry:
    def __init__(self, items: Iterable[str] = ()):
        self.items: List[str] = []
        for item in items:
            self.add_item(item)

    def add_item(self, item: str):
        '''
        Adds an item name to the pantry. Duplicates are ignored.
        '''
        name = PantryItemInput(item=item).item
        if name not in self.items:
            self.items.append(name)

    def remove_item(self, item: str):
        '''
        Removes an item name from the pantry.
        '''
        name = normalize_item_name(item)
        if name not in self.items:
            raise ValueError(f"Item '{item}' not found in pantry.")
        self.items.remove(name)

    def __contains__(self, item) -> bool:
        return normalize_item_name(item) in self.items

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)

    def get_items(self):
        '''
        Returns the list of pantry item names.
        '''
        return self.items

    def __str__(self) -> str:
        items_str = ",\n\t".join(self.items)
        return f"Items:\n\t{items_str}"

    def __repr__(self) -> str:
        return self.__str__()

    @staticmethod
    def from_dict(data):
        '''
        Builds a Pantry from stored records: [{"item": "salt"}, ...] or plain names.
        '''
        pantry = Pantry()
        for entry in data or []:
            pantry.add_item(entry["item"] if isinstance(entry, dict) else entry)
        return pantry

    def to_dict(self):
        '''
        Converts the Pantry to a list of records.
        '''
        return [{"item": item} for item in self.items]
