"""
CRUD operations and the selection of the operations exposed by a controller

    api.crud(Todo, methods=Only(Operation.READ_ONE, Operation.DELETE))
    api.crud(Todo, methods=Except(Operation.DELETE))

Except() is resolved against the maximal operation set of the controller kind,
a parent relation can't create or delete the parent, so its maximal set only
holds READ_ONE and UPDATE.
"""
from enum import Enum
from http import HTTPStatus
import crudrouter
from .config import get_config
from .errors import ConfigurationError


class Operation(str, Enum):
    # declaration order is the registration order
    READ_ALL = "read_all"
    READ_ONE = "read_one"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


ALL_OPERATIONS = frozenset(Operation)

MAXIMAL_OPERATIONS = {
    "resource": ALL_OPERATIONS,
    "children": ALL_OPERATIONS,
    "siblings": ALL_OPERATIONS,
    "parent": frozenset({Operation.READ_ONE, Operation.UPDATE}),
}

# operation => (http verb, whether the identifier path is used)
OPERATION_ROUTES = {
    Operation.READ_ALL: ("GET", False),
    Operation.READ_ONE: ("GET", True),
    Operation.CREATE: ("POST", False),
    Operation.UPDATE: ("PUT", True),
    Operation.DELETE: ("DELETE", True),
}


class OperationSelector:
    """
    Base class for Only and Except
    """

    def __init__(self, *operations):
        for operation in operations:
            if not isinstance(operation, Operation):
                raise ConfigurationError(f"Invalid operation {operation!r}")
        self.operations = frozenset(operations)

    def resolve(self, maximal):
        """
        :param maximal: largest legal operation set for the controller kind
        :return: frozenset of operations
        """
        raise NotImplementedError

    def __repr__(self):
        ops = ", ".join(op.name for op in sorted_operations(self.operations))
        return f"{self.__class__.__name__}({ops})"


class Only(OperationSelector):
    """
    Expose only the given operations
    """

    def resolve(self, maximal):
        invalid = self.operations - maximal
        if invalid:
            names = ", ".join(op.name for op in sorted_operations(invalid))
            raise ConfigurationError(f"Operations not supported here: {names}")
        return self.operations


class Except(OperationSelector):
    """
    Expose all operations of the maximal set, except the given operations
    """

    def resolve(self, maximal):
        return frozenset(maximal - self.operations)


def select_operations(methods, kind):
    """
    :param methods: Only/Except selector or None for the maximal set
    :param kind: controller kind, a MAXIMAL_OPERATIONS key
    """
    maximal = MAXIMAL_OPERATIONS[kind]
    if methods is None:
        return maximal
    if not isinstance(methods, OperationSelector):
        # a plain collection of operations is an allow-list
        methods = Only(*methods)
    return methods.resolve(maximal)


def sorted_operations(operations):
    return [op for op in Operation if op in operations]


def register_operations(operations, router, controller, base_path, id_path):
    """
    Bind one (http verb, path) pair for each operation in operations

    :param operations: operation set
    :param router: CrudApi
    :param controller: controller implementing the operation handlers (methods named after the operation value)
    :param base_path: collection path
    :param id_path: identifier path
    """
    bound = []
    for operation in sorted_operations(operations):
        verb, use_id = OPERATION_ROUTES[operation]
        path = id_path if use_id else base_path
        handler = getattr(controller, operation.value)
        endpoint = controller.endpoint_name(operation)
        bound.append(router.bind(verb, path, handler, endpoint=endpoint))
    crudrouter.log.debug(f"{controller} bound {len(bound)} routes")
    return bound


def create_status():
    """
    :return: status code for successful creation
    """
    status = get_config("CRUD_CREATE_STATUS") or HTTPStatus.OK.value
    return int(status)
