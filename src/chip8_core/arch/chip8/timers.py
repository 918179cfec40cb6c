# src/chip8_core/arch/chip8/timers.py
"""
ディレイタイマーとサウンドタイマー。
外部の固定レート（60Hz）のティックで駆動されます。音の生成は行いません。
"""
TIMER_HZ = 60

# @intent:utility_function 8bitカウンタを1減らします。0未満にはなりません。
def decrement(value: int) -> int:
    return value - 1 if value > 0 else 0

# @intent:responsibility 両タイマーを1ティック分進めます。
# @intent:pre-condition stateはdelay_timerとsound_timer属性を持つ必要があります。
def tick(state) -> None:
    state.delay_timer = decrement(state.delay_timer)
    state.sound_timer = decrement(state.sound_timer)
