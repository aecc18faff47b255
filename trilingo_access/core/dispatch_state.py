"""Dispatch State Machine - pure channel-selection rules for one logical call.

Invariants:
    - States: TRY_PUBLIC -> (TRY_AUTHENTICATED) -> DONE; DONE is absorbing
    - Reads start public unless the descriptor opts out (public_first=False)
    - Writes start authenticated unless pure_public or public_first is set
    - Escalation happens only from TRY_PUBLIC, only on 401/403, never for pure_public
    - At most one attempt sequence per channel per call (no ping-pong)

Design Decisions:
    - Enum states with pure transition functions; the access client drives the loop
    - The authenticated channel is the last resort: any outcome there ends the call
"""

from trilingo_access.core.domain_types import ChannelName, DispatchState
from trilingo_access.core.request_types import AttemptOutcome, RequestDescriptor


def initial_state(descriptor: RequestDescriptor) -> DispatchState:
    """Pick the first channel for a call."""
    if descriptor.pure_public:
        return DispatchState.TRY_PUBLIC
    # read() defaults public_first to True, write() to False
    return (
        DispatchState.TRY_PUBLIC if descriptor.public_first
        else DispatchState.TRY_AUTHENTICATED
    )


def next_state(
    state: DispatchState,
    descriptor: RequestDescriptor,
    outcome: AttemptOutcome,
) -> DispatchState:
    """Transition after a channel's attempt sequence finished with `outcome`."""
    if state is DispatchState.TRY_PUBLIC:
        if outcome.is_permission_denied and not descriptor.pure_public:
            return DispatchState.TRY_AUTHENTICATED
        return DispatchState.DONE
    return DispatchState.DONE


def channel_for(state: DispatchState) -> ChannelName:
    """Channel used while in `state`. DONE has no channel."""
    if state is DispatchState.TRY_PUBLIC:
        return ChannelName.PUBLIC
    if state is DispatchState.TRY_AUTHENTICATED:
        return ChannelName.AUTHENTICATED
    raise ValueError("DONE state has no channel")


def plan_channels(descriptor: RequestDescriptor) -> list[ChannelName]:
    """Channels a call may visit, in order, if every escalation fires."""
    state = initial_state(descriptor)
    channels = [channel_for(state)]
    if state is DispatchState.TRY_PUBLIC and not descriptor.pure_public:
        channels.append(ChannelName.AUTHENTICATED)
    return channels
