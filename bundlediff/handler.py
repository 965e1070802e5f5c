# coding: utf-8

# Copyright (c) bundlediff Development Team.
# Distributed under the terms of the Modified BSD License.

import uuid

from .diffing import diff, DiffConfig
from .patching import apply_object_diff, apply_array_diff
from .prettyprint import diff_tree
from .registry import FieldType
from .log import debug


class MessageData(object):
    """A localized text entry: a key, a guid and one string per language."""

    def __init__(self, key="", guid=None, messages=None):
        self.key = key
        self.guid = guid if guid is not None else uuid.UUID(int=0)
        self.messages = dict(messages or {})

    def get(self, language, default=""):
        return self.messages.get(language, default)

    def set(self, language, text):
        self.messages[language] = text

    def to_json(self):
        return {
            "MessageKey": self.key,
            "Guid": str(self.guid),
            "Messages": dict(self.messages),
        }


class DiffHandler(object):
    """Binds diffing and patching to the resource shapes of a workspace.

    Tree shaped resources (a single object, or a list of objects) go
    through the generic engine, typed through the given registry.
    Message entries are flat records and are patched by hand.
    """

    def __init__(self, registry, config=None):
        self.registry = registry
        self.config = config if config is not None else DiffConfig()

    def get_hierarchical_data_diff(self, target, source):
        return diff(target, source, config=self.config)

    def apply_diff(self, instance, di):
        """Apply a diff to an instance in place.

        A type change replaces the instance inside the engine,
        the new values are copied back into the given instance.
        """
        if di is None:
            return instance
        new_instance = apply_object_diff(instance, di, self.registry)
        if new_instance is not instance:
            instance.copy_values_from(new_instance)
        return instance

    def apply_list_diff(self, instances, di, element_type=None):
        if di is None:
            return instances
        return apply_array_diff(
            instances, di, FieldType.OBJECT, element_type, self.registry)

    def apply_message_diff(self, message, di):
        if not isinstance(di, dict):
            return message

        key = di.get("MessageKey")
        if key is not None:
            message.key = str(key)

        guid = di.get("Guid")
        if guid is not None:
            try:
                message.guid = uuid.UUID(str(guid))
            except ValueError:
                debug("Ignoring invalid guid %r for message %s", guid, message.key)

        messages = di.get("Messages")
        if isinstance(messages, dict):
            for language, text in messages.items():
                if text is not None:
                    message.set(language, text)
        return message

    @staticmethod
    def diff_tree(di):
        return diff_tree(di)
