"""Ability text used across the test suite."""

MELEE_ATTACK = (
    "Melee Weapon Attack: +5 to hit, reach 5 ft., one target. "
    "Hit: 8 (1d8 + 4) slashing damage."
)

FLAME_SWORD = (
    "Flame Sword: Melee Weapon Attack: +7 to hit, reach 5 ft., one target. "
    "Hit: 8 (1d8 + 4) slashing damage plus 4 (1d4) fire damage."
)

LIGHTNING_BOLT = "DC 15 Dex save, 60-foot line. 28 (8d6) lightning damage, half on save."

BEAR_HUG = (
    "Bear Hug (Recharge 4-6). The owlbear attempts to grab and crush a creature they "
    "can see within 5 feet of them. The target must make a DC 15 Dexterity saving "
    "throw. On a failed save, the target takes 22 (4d10) bludgeoning damage and is "
    "grappled (escape DC 15). On a successful save, the target takes half as much "
    "damage and is not grappled. Until this grapple ends, the target is restrained "
    "and takes 5 (1d10) bludgeoning damage at the start of each of their turns."
)

DEADLY_LEAP = (
    "Deadly Leap. The owlbear's long jump is up to 30 feet and their high jump is 15 "
    "feet, with or without a running start. If the owlbear leaps at least 20 feet "
    "toward a target and then hits them with a Bite or Claw attack, the target must "
    "succeed on a DC 15 Strength saving throw or be knocked prone."
)

POISON_BITE = (
    "Melee Weapon Attack: +5 to hit, reach 5 ft., one target. "
    "Hit: 7 (1d8 + 3) piercing damage, and the target must succeed on a DC 13 "
    "Constitution saving throw or be poisoned for 1 minute."
)

SHIELD_BLOCK = (
    "Reaction: when the guardian is attacked by a creature within 5 feet that it "
    "can see, it adds 2 to its AC against that attack."
)

MIND_JOLT = (
    "DC 13 Wisdom saving throw. On a failed save, the target is dazed (save ends)."
)

FIRE_BREATH = (
    "Fire Breath (3/Day). The dragon exhales fire in a 30-foot cone. Each creature "
    "in that area must make a DC 16 Dexterity saving throw, taking 35 (10d6) fire "
    "damage on a failed save, or half as much damage on a successful one."
)

STONE_SKIN = "Stone Skin. The golem is resistant to bludgeoning, piercing and slashing damage."

BURNING_HANDS = (
    "The target takes 5 (1d10) fire damage at the start of each of its turns. "
    "It can repeat the saving throw at the end of each of its turns, ending the "
    "effect on a success. DC 14 Constitution saving throw."
)

FLYBY_STRIKE = (
    "The hawk flies toward its prey and makes a talon attack, and it doesn't provoke "
    "opportunity attacks when it flies out of an enemy's reach."
)
