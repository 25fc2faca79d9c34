"""Reference catalog of common smart-contract vulnerability types.

Used to enrich a vulnerability name selected in the dashboard with its
description, impact, remediation and a before/after Solidity example.
"""

from __future__ import annotations

from contract_dashboard.models import SeverityTier, VulnerabilityDetail

VULNERABILITY_CATALOG: dict[str, VulnerabilityDetail] = {
    "Reentrancy": VulnerabilityDetail(
        name="Reentrancy Attack",
        severity=SeverityTier.CRITICAL,
        description=(
            "A reentrancy attack occurs when a function makes an external call to another untrusted "
            "contract before resolving its own state. The attacker can recursively call back into the "
            "original function, potentially draining funds or manipulating state."
        ),
        impact=(
            "Can lead to complete loss of funds, unauthorized state changes, and contract compromise. "
            "The DAO hack in 2016 resulted in a loss of $60 million due to a reentrancy vulnerability."
        ),
        remediation=(
            "Use the Checks-Effects-Interactions pattern: perform all checks first, update state "
            "variables, then make external calls. Alternatively, use ReentrancyGuard from OpenZeppelin "
            "or implement mutex locks."
        ),
        code_example="""// Vulnerable Code
function withdraw(uint amount) public {
    require(balances[msg.sender] >= amount);
    msg.sender.call{value: amount}("");
    balances[msg.sender] -= amount; // State updated AFTER external call
}

// Fixed Code
function withdraw(uint amount) public {
    require(balances[msg.sender] >= amount);
    balances[msg.sender] -= amount; // State updated BEFORE external call
    msg.sender.call{value: amount}("");
}""",
    ),
    "Integer Overflow": VulnerabilityDetail(
        name="Integer Overflow/Underflow",
        severity=SeverityTier.HIGH,
        description=(
            "Integer overflow occurs when an arithmetic operation exceeds the maximum value a variable "
            "can hold, wrapping around to zero. Underflow is the opposite, wrapping to the maximum value."
        ),
        impact=(
            "Can lead to incorrect calculations, unauthorized token minting, bypassing of balance "
            "checks, and financial losses."
        ),
        remediation=(
            "Use Solidity 0.8.0+ which has built-in overflow/underflow checks, or use SafeMath library "
            "for older versions. Always validate arithmetic operations."
        ),
        code_example="""// Vulnerable Code (Solidity < 0.8.0)
uint256 balance = 100;
balance = balance - 200; // Underflows to max uint256

// Fixed Code (Solidity >= 0.8.0)
uint256 balance = 100;
balance = balance - 200; // Reverts automatically

// Or use SafeMath
using SafeMath for uint256;
balance = balance.sub(200); // Reverts on underflow""",
    ),
    "Unchecked Call": VulnerabilityDetail(
        name="Unchecked External Call",
        severity=SeverityTier.MEDIUM,
        description=(
            "When a contract makes an external call without checking the return value, it may continue "
            "execution even if the call failed, leading to unexpected behavior."
        ),
        impact="Failed transfers may go unnoticed, leading to loss of funds or incorrect state assumptions.",
        remediation=(
            "Always check return values of external calls. Use require() to ensure calls succeed, or "
            "handle failures explicitly."
        ),
        code_example="""// Vulnerable Code
address.call{value: amount}(""); // Return value ignored

// Fixed Code
(bool success, ) = address.call{value: amount}("");
require(success, "Transfer failed");""",
    ),
    "Access Control": VulnerabilityDetail(
        name="Access Control Vulnerability",
        severity=SeverityTier.HIGH,
        description=(
            "Improper access control allows unauthorized users to execute privileged functions, "
            "potentially compromising the entire contract."
        ),
        impact="Attackers can gain admin privileges, modify critical parameters, drain funds, or destroy the contract.",
        remediation=(
            "Implement proper access control using modifiers, OpenZeppelin's Ownable or AccessControl "
            "contracts. Always validate msg.sender."
        ),
        code_example="""// Vulnerable Code
function setOwner(address newOwner) public {
    owner = newOwner; // Anyone can call this!
}

// Fixed Code
modifier onlyOwner() {
    require(msg.sender == owner, "Not authorized");
    _;
}

function setOwner(address newOwner) public onlyOwner {
    owner = newOwner;
}""",
    ),
    "Timestamp Dependence": VulnerabilityDetail(
        name="Timestamp Dependence",
        severity=SeverityTier.LOW,
        description=(
            "Relying on block.timestamp for critical logic can be manipulated by miners within a ~15 "
            "second window, potentially affecting time-sensitive operations."
        ),
        impact="Can affect lottery outcomes, auction endings, or time-locked operations if exploited by miners.",
        remediation=(
            "Avoid using block.timestamp for critical randomness or precise timing. Use block.number for "
            "relative time, or oracle services for secure randomness."
        ),
        code_example="""// Vulnerable Code
if (block.timestamp % 2 == 0) {
    winner = player1; // Miner can manipulate
}

// Better Approach
if (block.number % 2 == 0) {
    winner = player1; // Harder to manipulate
}

// Best Approach
// Use Chainlink VRF for randomness""",
    ),
}


def get_vulnerability_detail(name: str | None) -> VulnerabilityDetail | None:
    """Look up a catalog entry by type name (exact, then case-insensitive)."""
    if not name:
        return None
    if name in VULNERABILITY_CATALOG:
        return VULNERABILITY_CATALOG[name]
    name_lower = name.lower()
    for key, detail in VULNERABILITY_CATALOG.items():
        if key.lower() == name_lower:
            return detail
    return None
