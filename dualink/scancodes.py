"""Linux keyboard scancodes and their configuration names."""

from __future__ import annotations

from enum import IntEnum


class Scancode(IntEnum):
    """Linux input event key codes, named as they appear in configuration."""

    KeyReserved = 0
    KeyEsc = 1
    Key1 = 2
    Key2 = 3
    Key3 = 4
    Key4 = 5
    Key5 = 6
    Key6 = 7
    Key7 = 8
    Key8 = 9
    Key9 = 10
    Key0 = 11
    KeyMinus = 12
    KeyEqual = 13
    KeyBackspace = 14
    KeyTab = 15
    KeyQ = 16
    KeyW = 17
    KeyE = 18
    KeyR = 19
    KeyT = 20
    KeyY = 21
    KeyU = 22
    KeyI = 23
    KeyO = 24
    KeyP = 25
    KeyLeftbrace = 26
    KeyRightbrace = 27
    KeyEnter = 28
    KeyLeftCtrl = 29
    KeyA = 30
    KeyS = 31
    KeyD = 32
    KeyF = 33
    KeyG = 34
    KeyH = 35
    KeyJ = 36
    KeyK = 37
    KeyL = 38
    KeySemicolon = 39
    KeyApostrophe = 40
    KeyGrave = 41
    KeyLeftShift = 42
    KeyBackslash = 43
    KeyZ = 44
    KeyX = 45
    KeyC = 46
    KeyV = 47
    KeyB = 48
    KeyN = 49
    KeyM = 50
    KeyComma = 51
    KeyDot = 52
    KeySlash = 53
    KeyRightShift = 54
    KeyKpAsterisk = 55
    KeyLeftAlt = 56
    KeySpace = 57
    KeyCapsLock = 58
    KeyF1 = 59
    KeyF2 = 60
    KeyF3 = 61
    KeyF4 = 62
    KeyF5 = 63
    KeyF6 = 64
    KeyF7 = 65
    KeyF8 = 66
    KeyF9 = 67
    KeyF10 = 68
    KeyNumlock = 69
    KeyScrollLock = 70
    KeyKp7 = 71
    KeyKp8 = 72
    KeyKp9 = 73
    KeyKpMinus = 74
    KeyKp4 = 75
    KeyKp5 = 76
    KeyKp6 = 77
    KeyKpplus = 78
    KeyKp1 = 79
    KeyKp2 = 80
    KeyKp3 = 81
    KeyKp0 = 82
    KeyKpDot = 83
    KeyZenkakuhankaku = 85
    Key102nd = 86
    KeyF11 = 87
    KeyF12 = 88
    KeyRo = 89
    KeyKatakana = 90
    KeyHiragana = 91
    KeyHenkan = 92
    KeyKatakanahiragana = 93
    KeyMuhenkan = 94
    KeyKpJpComma = 95
    KeyKpEnter = 96
    KeyRightCtrl = 97
    KeyKpslash = 98
    KeySysrq = 99
    KeyRightalt = 100
    KeyLinefeed = 101
    KeyHome = 102
    KeyUp = 103
    KeyPageup = 104
    KeyLeft = 105
    KeyRight = 106
    KeyEnd = 107
    KeyDown = 108
    KeyPagedown = 109
    KeyInsert = 110
    KeyDelete = 111
    KeyMacro = 112
    KeyMute = 113
    KeyVolumeDown = 114
    KeyVolumeUp = 115
    KeyPower = 116
    KeyKpequal = 117
    KeyKpplusminus = 118
    KeyPause = 119
    KeyScale = 120
    KeyKpcomma = 121
    KeyHangeul = 122
    KeyHanja = 123
    KeyYen = 124
    KeyLeftMeta = 125
    KeyRightmeta = 126
    KeyCompose = 127
    KeyStop = 128
    KeyAgain = 129
    KeyProps = 130
    KeyUndo = 131
    KeyFront = 132
    KeyCopy = 133
    KeyOpen = 134
    KeyPaste = 135
    KeyFind = 136
    KeyCut = 137
    KeyHelp = 138
    KeyMenu = 139
    KeyCalc = 140
    KeySetup = 141
    KeySleep = 142
    KeyWakeup = 143
    KeyFile = 144
    KeySendFile = 145
    KeyDeletefile = 146
    KeyXfer = 147
    KeyProg1 = 148
    KeyProg2 = 149
    KeyWww = 150
    KeyMsdos = 151
    KeyCoffee = 152
    KeyRotateDisplay = 153
    KeyCyclewindows = 154
    KeyMail = 155
    KeyBookmarks = 156
    KeyComputer = 157
    KeyBack = 158
    KeyForward = 159
    KeyClosecd = 160
    KeyEjectcd = 161
    KeyEjectclosecd = 162
    KeyNextsong = 163
    KeyPlaypause = 164
    KeyPrevioussong = 165
    KeyStopcd = 166
    KeyRecord = 167
    KeyRewind = 168
    KeyPhone = 169
    KeyIso = 170
    KeyConfig = 171
    KeyHomepage = 172
    KeyRefresh = 173
    KeyExit = 174
    KeyMove = 175
    KeyEdit = 176
    KeyScrollup = 177
    KeyScrolldown = 178
    KeyKpleftparen = 179
    KeyKprightparen = 180
    KeyNew = 181
    KeyRedo = 182
    KeyF13 = 183
    KeyF14 = 184
    KeyF15 = 185
    KeyF16 = 186
    KeyF17 = 187
    KeyF18 = 188
    KeyF19 = 189
    KeyF20 = 190
    KeyF21 = 191
    KeyF22 = 192
    KeyF23 = 193
    KeyF24 = 194


def scancode_from_name(name: str) -> Scancode:
    """Look up a scancode by its exact configuration name.

    Raises ``ValueError`` for unknown names.
    """
    try:
        return Scancode[name]
    except KeyError:
        raise ValueError(f"unknown key name: {name!r}") from None