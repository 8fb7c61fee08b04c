"""
THE PUPPETEER: input
"I need to play the game."
Consumes: get_input_map, execute_input_sequence, type_text,
          mouse_click, mouse_move, mouse_scroll, mouse_drag

Arguments are parsed in two steps: ``InputSchema`` is the flat argument
schema shown to callers (types, ranges and which fields each action needs),
and ``InputSchema.to_request()`` turns it into one of the request variants
with every default filled in.
"""
from typing import Annotated, List, Literal, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictFloat,
    StrictInt,
    TypeAdapter,
    model_validator,
)
from langchain_core.tools import tool

from .connection import CommandChannel, call_godot, get_godot_manager

Number = Union[StrictInt, StrictFloat]
MouseButton = Literal["left", "right", "middle"]
ScrollDirection = Literal["up", "down"]

InputActionName = Literal[
    "get_map", "sequence", "type_text", "mouse_click", "mouse_move", "mouse_scroll", "mouse_drag"
]

REQUIRED_FIELDS_MESSAGE = (
    "sequence requires inputs array; type_text requires text string; "
    "mouse_click/mouse_move/mouse_scroll require x and y; "
    "mouse_drag requires from_x, from_y, to_x, to_y"
)

NO_ACTIONS_MESSAGE = (
    "No custom input actions defined. Games should define actions in Project Settings > Input Map."
)


class InputAction(BaseModel):
    """One Input Map action, pressed at start_ms and held for duration_ms."""
    action_name: str = Field(..., min_length=1, description="The input action name from the project Input Map.")
    start_ms: StrictInt = Field(0, ge=0, description="When to start the input (milliseconds from sequence start).")
    duration_ms: StrictInt = Field(0, ge=0, description="How long to hold the input (0 = instant tap).")


class InputSchema(BaseModel):
    action: InputActionName = Field(
        ...,
        description=(
            "get_map (list available input actions), sequence (execute input timeline), "
            "type_text (type text into focused UI element), mouse_click (click at coordinates), "
            "mouse_move (move cursor), mouse_scroll (scroll wheel), mouse_drag (drag between points)."
        )
    )

    # Sequence params
    inputs: Optional[List[InputAction]] = Field(
        None, min_length=1, description="Inputs to execute (sequence only)."
    )

    # Typing params
    text: Optional[str] = Field(None, min_length=1, description="Text to type (type_text only).")
    delay_ms: Optional[StrictInt] = Field(
        None, ge=0, description="Delay between keystrokes in milliseconds (type_text only, default 50)."
    )
    submit: Optional[StrictBool] = Field(
        None, description="Press Enter after typing to submit (type_text only, default false)."
    )

    # Pointer params
    x: Optional[Number] = Field(None, description="X coordinate in viewport pixels (mouse_click, mouse_move, mouse_scroll).")
    y: Optional[Number] = Field(None, description="Y coordinate in viewport pixels (mouse_click, mouse_move, mouse_scroll).")
    button: Optional[MouseButton] = Field(None, description="Mouse button (mouse_click, mouse_drag; default left).")
    direction: Optional[ScrollDirection] = Field(None, description="Scroll direction (mouse_scroll only, default up).")
    clicks: Optional[StrictInt] = Field(None, ge=1, description="Number of scroll clicks (mouse_scroll only, default 1).")

    # Drag params
    from_x: Optional[Number] = Field(None, description="Start X coordinate (mouse_drag only).")
    from_y: Optional[Number] = Field(None, description="Start Y coordinate (mouse_drag only).")
    to_x: Optional[Number] = Field(None, description="End X coordinate (mouse_drag only).")
    to_y: Optional[Number] = Field(None, description="End Y coordinate (mouse_drag only).")
    duration_ms: Optional[StrictInt] = Field(
        None, ge=0, description="Duration in ms for drag movement (mouse_drag only, default 100)."
    )
    steps: Optional[StrictInt] = Field(
        None, ge=2, description="Number of intermediate move events during drag (mouse_drag only, default 10)."
    )

    @model_validator(mode="after")
    def _check_required_fields(self) -> "InputSchema":
        if not self._has_required_fields():
            raise ValueError(REQUIRED_FIELDS_MESSAGE)
        return self

    def _has_required_fields(self) -> bool:
        if self.action == "sequence":
            return bool(self.inputs)
        if self.action == "type_text":
            return bool(self.text)
        if self.action in ("mouse_click", "mouse_move", "mouse_scroll"):
            return self.x is not None and self.y is not None
        if self.action == "mouse_drag":
            return None not in (self.from_x, self.from_y, self.to_x, self.to_y)
        return True

    def to_request(self) -> "InputRequest":
        """Build the request variant for this action, filling in defaults."""
        return _request_adapter.validate_python(self.model_dump(exclude_none=True))


# =============================================================================
# Request variants
# =============================================================================

class _Request(BaseModel):
    # The flat schema's fields for other actions are dropped here
    model_config = ConfigDict(extra="ignore", frozen=True)


class GetMapRequest(_Request):
    action: Literal["get_map"] = "get_map"


class SequenceRequest(_Request):
    action: Literal["sequence"] = "sequence"
    inputs: List[InputAction] = Field(..., min_length=1)


class TypeTextRequest(_Request):
    action: Literal["type_text"] = "type_text"
    text: str = Field(..., min_length=1)
    delay_ms: StrictInt = Field(50, ge=0)
    submit: StrictBool = False


class MouseClickRequest(_Request):
    action: Literal["mouse_click"] = "mouse_click"
    x: Number
    y: Number
    button: MouseButton = "left"


class MouseMoveRequest(_Request):
    action: Literal["mouse_move"] = "mouse_move"
    x: Number
    y: Number


class MouseScrollRequest(_Request):
    action: Literal["mouse_scroll"] = "mouse_scroll"
    x: Number
    y: Number
    direction: ScrollDirection = "up"
    clicks: StrictInt = Field(1, ge=1)


class MouseDragRequest(_Request):
    action: Literal["mouse_drag"] = "mouse_drag"
    from_x: Number
    from_y: Number
    to_x: Number
    to_y: Number
    button: MouseButton = "left"
    duration_ms: StrictInt = Field(100, ge=0)
    steps: StrictInt = Field(10, ge=2)


InputRequest = Annotated[
    Union[
        GetMapRequest,
        SequenceRequest,
        TypeTextRequest,
        MouseClickRequest,
        MouseMoveRequest,
        MouseScrollRequest,
        MouseDragRequest,
    ],
    Field(discriminator="action"),
]

_request_adapter: TypeAdapter = TypeAdapter(InputRequest)


def parse_input_request(data: dict) -> InputRequest:
    """
    Validate raw tool arguments and return the fully populated request.

    Raises:
        pydantic.ValidationError: On a bad type or range, or when the action's
            required fields are missing.
    """
    return InputSchema.model_validate(data).to_request()


# =============================================================================
# Dispatch
# =============================================================================

def sequence_span_ms(inputs: List[InputAction]) -> int:
    """Total choreography length: the latest end time of any input."""
    return max(i.start_ms + i.duration_ms for i in inputs)


def distinct_action_names(inputs: List[InputAction]) -> List[str]:
    """Action names in first-occurrence order, without duplicates."""
    return list(dict.fromkeys(i.action_name for i in inputs))


async def execute_input(request: InputRequest, godot: CommandChannel) -> str:
    """
    Run one input request against Godot and describe the outcome.

    Exactly one command is sent. An ``error`` in the response is raised as
    GodotCommandError with the addon's message unchanged.
    """
    if isinstance(request, GetMapRequest):
        result = await call_godot(godot, "get_input_map")
        actions = result.get("actions") or []
        if not actions:
            return NO_ACTIONS_MESSAGE

        lines = [f"Input actions (source: {result.get('source')}):"]
        for action in actions:
            events = action.get("events") or []
            bindings = ", ".join(events) if events else "no bindings"
            lines.append(f"  {action.get('name')}: {bindings}")
        return "\n".join(lines)

    if isinstance(request, SequenceRequest):
        result = await call_godot(godot, "execute_input_sequence", {
            "inputs": [i.model_dump() for i in request.inputs],
        })
        names = ", ".join(distinct_action_names(request.inputs))
        span = sequence_span_ms(request.inputs)
        return (
            f"Input sequence completed: {result.get('actions_executed')} action(s) executed "
            f"[{names}] over {span}ms"
        )

    if isinstance(request, TypeTextRequest):
        result = await call_godot(godot, "type_text", {
            "text": request.text,
            "delay_ms": request.delay_ms,
            "submit": request.submit,
        })
        submitted = " and submitted" if result.get("submitted") else ""
        return f"Typed {result.get('chars_typed')} character(s){submitted}"

    if isinstance(request, MouseClickRequest):
        await call_godot(godot, "mouse_click", {
            "x": request.x,
            "y": request.y,
            "button": request.button,
        })
        return f"Clicked {request.button} mouse button at ({request.x}, {request.y})"

    if isinstance(request, MouseMoveRequest):
        await call_godot(godot, "mouse_move", {"x": request.x, "y": request.y})
        return f"Moved mouse to ({request.x}, {request.y})"

    if isinstance(request, MouseScrollRequest):
        await call_godot(godot, "mouse_scroll", {
            "x": request.x,
            "y": request.y,
            "direction": request.direction,
            "clicks": request.clicks,
        })
        return f"Scrolled {request.direction} {request.clicks} click(s) at ({request.x}, {request.y})"

    if isinstance(request, MouseDragRequest):
        await call_godot(godot, "mouse_drag", {
            "from_x": request.from_x,
            "from_y": request.from_y,
            "to_x": request.to_x,
            "to_y": request.to_y,
            "button": request.button,
            "duration_ms": request.duration_ms,
            "steps": request.steps,
        })
        return (
            f"Dragged from ({request.from_x}, {request.from_y}) to ({request.to_x}, {request.to_y}) "
            f"over {request.duration_ms}ms"
        )

    raise TypeError(f"Unsupported input request: {request!r}")


@tool("input", args_schema=InputSchema)
async def godot_input(
    action: InputActionName,
    inputs: Optional[List[InputAction]] = None,
    text: Optional[str] = None,
    delay_ms: Optional[StrictInt] = None,
    submit: Optional[StrictBool] = None,
    x: Optional[Number] = None,
    y: Optional[Number] = None,
    button: Optional[MouseButton] = None,
    direction: Optional[ScrollDirection] = None,
    clicks: Optional[StrictInt] = None,
    from_x: Optional[Number] = None,
    from_y: Optional[Number] = None,
    to_x: Optional[Number] = None,
    to_y: Optional[Number] = None,
    duration_ms: Optional[StrictInt] = None,
    steps: Optional[StrictInt] = None
) -> str:
    """
    Inject input into a running Godot game for testing.

    Actions:
    - 'get_map': Discover the project's Input Map actions and their bindings.
    - 'sequence': Execute Input Map actions with precise timing (requires inputs).
    - 'type_text': Type into the focused UI element (requires text).
    - 'mouse_click' / 'mouse_move' / 'mouse_scroll': Coordinate-based mouse input (requires x, y).
    - 'mouse_drag': Drag between two points (requires from_x, from_y, to_x, to_y).

    TIP: Call get_map first - sequence only accepts action names that exist in the Input Map.
    """
    schema = InputSchema(
        action=action, inputs=inputs, text=text, delay_ms=delay_ms, submit=submit,
        x=x, y=y, button=button, direction=direction, clicks=clicks,
        from_x=from_x, from_y=from_y, to_x=to_x, to_y=to_y,
        duration_ms=duration_ms, steps=steps,
    )
    return await execute_input(schema.to_request(), get_godot_manager())
