"""Named constants for the generator and the code it emits."""

from __future__ import annotations

DEFAULT_NAMESPACE = "Urho3D"
DEFAULT_LIBRARY = "Urho3DCSharp"
DEFAULT_CALLING_CONVENTION = "Cdecl"
DEFAULT_OUTPUT_NAME = "PInvoke.cs"

REF_COUNTED_BASE = "Urho3D::RefCounted"

REQUIRED_USINGS: tuple[str, ...] = (
    "System",
    "System.Threading",
    "System.Collections.Concurrent",
    "System.Runtime.InteropServices",
)

INDENT = "    "

# Boundary naming
GETTER_PREFIX = "get_"
SETTER_PREFIX = "set_"
DESTRUCTOR_SUFFIX = "_destructor"
ADD_REF_SUFFIX = "__AddRef"
RELEASE_REF_SUFFIX = "__ReleaseRef"
DELEGATE_SUFFIX = "Delegate"
CALLBACK_SETTER_TEMPLATE = "set_{class_name}_fn{name}"

# Managed-side identifiers used by the emitted wrappers
HANDLE_TYPE = "IntPtr"
NULL_HANDLE = "IntPtr.Zero"
HANDLE_FIELD = "instance_"
DISPOSED_FIELD = "disposed_"
CACHE_FIELD = "cache_"
INSTANCE_PARAM = "instance"
FIELD_OWNER_PARAM = "cls"
SETTER_VALUE_PARAM = "value"
CALLBACK_PARAM = "cb"

STRING_REPRESENTATION = "string"
UTF8_RETURN_ATTRIBUTE = "[return: MarshalAs(UnmanagedType.LPUTF8Str)]"

TYPE_SPELLING_LANGUAGE = "cpp"
