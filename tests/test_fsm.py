from qgrid.app.fsm import TrainerState, TrainerStateMachine


def test_starts_idle():
    fsm = TrainerStateMachine()
    assert fsm.is_idle()
    assert fsm.get_state_description().startswith("Ready")


def test_train_pause_resume_cycle():
    fsm = TrainerStateMachine()
    assert fsm.start_training()
    assert fsm.is_training()
    assert fsm.pause()
    assert fsm.is_paused()
    assert fsm.start_training()
    assert fsm.is_training()
    assert fsm.reset_to_idle()
    assert fsm.is_idle()


def test_illegal_transitions_are_refused():
    fsm = TrainerStateMachine()
    assert not fsm.pause()
    assert not fsm.reset_to_idle()
    fsm.start_training()
    assert not fsm.start_training()
    assert fsm.current_state == TrainerState.TRAINING


def test_enter_callback_receives_context():
    fsm = TrainerStateMachine()
    calls = []
    fsm.on_state_enter(TrainerState.TRAINING, lambda ctx: calls.append(ctx))

    fsm.start_training({"reason": "test"})
    fsm.pause()

    assert calls == [{"reason": "test"}]


def test_only_entry_callbacks_are_supported():
    assert not hasattr(TrainerStateMachine(), "on_state_exit")
