"""Seed imaging options and cases for demos and tests."""

from aiie.models import ClinicalInput, Duration, Severity, Sex
from cases.models import (
    Case,
    CaseCategory,
    DifficultyLevel,
    ImagingOption,
    Modality,
    SpecialtyTrack,
)

IMAGING_OPTIONS: list[ImagingOption] = [
    ImagingOption(
        id="no-imaging",
        name="No imaging",
        short_name="None",
        modality=Modality.NONE,
        aiie_modality="No imaging",
    ),
    ImagingOption(
        id="xray-lumbar",
        name="X-ray lumbar spine",
        short_name="XR L-spine",
        modality=Modality.XRAY,
        aiie_modality="X-ray",
        body_region="lumbar spine",
        typical_cost_usd=100,
        radiation_msv=1.5,
    ),
    ImagingOption(
        id="xray-chest",
        name="Chest X-ray",
        short_name="CXR",
        modality=Modality.XRAY,
        aiie_modality="X-ray",
        body_region="chest",
        typical_cost_usd=100,
        radiation_msv=0.1,
    ),
    ImagingOption(
        id="xray-ankle",
        name="X-ray ankle",
        short_name="XR ankle",
        modality=Modality.XRAY,
        aiie_modality="X-ray",
        body_region="ankle",
        typical_cost_usd=80,
        radiation_msv=0.001,
    ),
    ImagingOption(
        id="ct-head",
        name="CT head without contrast",
        short_name="CT head",
        modality=Modality.CT,
        aiie_modality="CT without contrast",
        body_region="head",
        typical_cost_usd=500,
        radiation_msv=2.0,
    ),
    ImagingOption(
        id="cta-chest",
        name="CT angiography chest",
        short_name="CTA chest",
        modality=Modality.CT,
        aiie_modality="CT with contrast",
        body_region="chest",
        with_contrast=True,
        typical_cost_usd=800,
        radiation_msv=7.0,
    ),
    ImagingOption(
        id="ct-abdomen-contrast",
        name="CT abdomen and pelvis with contrast",
        short_name="CT A/P",
        modality=Modality.CT,
        aiie_modality="CT with contrast",
        body_region="abdomen",
        with_contrast=True,
        typical_cost_usd=700,
        radiation_msv=10.0,
    ),
    ImagingOption(
        id="mri-lumbar",
        name="MRI lumbar spine without contrast",
        short_name="MRI L-spine",
        modality=Modality.MRI,
        aiie_modality="MRI without contrast",
        body_region="lumbar spine",
        typical_cost_usd=1200,
    ),
    ImagingOption(
        id="mri-brain-contrast",
        name="MRI brain with and without contrast",
        short_name="MRI brain",
        modality=Modality.MRI,
        aiie_modality="MRI with contrast",
        body_region="head",
        with_contrast=True,
        typical_cost_usd=1800,
    ),
    ImagingOption(
        id="us-ruq",
        name="Ultrasound right upper quadrant",
        short_name="US RUQ",
        modality=Modality.ULTRASOUND,
        aiie_modality="Ultrasound",
        body_region="abdomen",
        typical_cost_usd=250,
    ),
    ImagingOption(
        id="spect-mpi",
        name="SPECT myocardial perfusion imaging",
        short_name="SPECT MPI",
        modality=Modality.NUCLEAR,
        aiie_modality="Nuclear medicine",
        body_region="chest",
        typical_cost_usd=1200,
        radiation_msv=10.0,
    ),
]

CASES: list[Case] = [
    Case(
        id="lbp-acute-mechanical",
        slug="acute-mechanical-low-back-pain",
        title="Acute Mechanical Low Back Pain",
        chief_complaint="Low back pain after lifting boxes",
        category=CaseCategory.LOW_BACK_PAIN,
        difficulty=DifficultyLevel.BEGINNER,
        specialty_tags=(SpecialtyTrack.FM, SpecialtyTrack.EM),
        optimal_imaging=("no-imaging",),
        explanation=(
            "Uncomplicated acute low back pain without red flags does not "
            "warrant imaging in the first six weeks."
        ),
        clinical_input=ClinicalInput(
            age=34,
            sex=Sex.MALE,
            chief_complaint="Low back pain after lifting boxes",
            duration=Duration.ACUTE,
            severity=Severity.MODERATE,
        ),
    ),
    Case(
        id="lbp-cancer-history",
        slug="low-back-pain-with-cancer-history",
        title="Back Pain in a Patient with Prostate Cancer",
        chief_complaint="Progressive back pain and leg weakness",
        category=CaseCategory.LOW_BACK_PAIN,
        difficulty=DifficultyLevel.ADVANCED,
        specialty_tags=(SpecialtyTrack.EM, SpecialtyTrack.IM),
        optimal_imaging=("mri-lumbar",),
        explanation=(
            "Cancer history with a new neurologic deficit requires MRI to "
            "exclude metastatic cord compression."
        ),
        clinical_input=ClinicalInput(
            age=71,
            sex=Sex.MALE,
            chief_complaint="Progressive back pain and leg weakness",
            duration=Duration.SUBACUTE,
            severity=Severity.SEVERE,
            red_flags=("night pain", "weight loss"),
            cancer_history=True,
            neurologic_deficit=True,
            progressive_symptoms=True,
        ),
    ),
    Case(
        id="headache-migraine",
        slug="recurrent-migraine-headache",
        title="Recurrent Migraine Headache",
        chief_complaint="Typical migraine, unchanged pattern",
        category=CaseCategory.HEADACHE,
        difficulty=DifficultyLevel.BEGINNER,
        specialty_tags=(SpecialtyTrack.FM, SpecialtyTrack.IM),
        optimal_imaging=("no-imaging",),
        explanation=(
            "A stable migraine pattern with a normal exam does not require "
            "neuroimaging."
        ),
        clinical_input=ClinicalInput(
            age=28,
            sex=Sex.FEMALE,
            chief_complaint="Typical migraine, unchanged pattern",
            duration=Duration.CHRONIC,
            severity=Severity.MILD,
            prior_imaging=("MRI brain 2023",),
        ),
    ),
    Case(
        id="headache-thunderclap",
        slug="thunderclap-headache",
        title="Sudden Severe Headache",
        chief_complaint="Worst headache of life",
        category=CaseCategory.HEADACHE,
        difficulty=DifficultyLevel.INTERMEDIATE,
        specialty_tags=(SpecialtyTrack.EM,),
        optimal_imaging=("ct-head",),
        explanation=(
            "Thunderclap headache requires non-contrast head CT to exclude "
            "subarachnoid hemorrhage."
        ),
        clinical_input=ClinicalInput(
            age=52,
            sex=Sex.FEMALE,
            chief_complaint="Worst headache of life",
            duration=Duration.ACUTE,
            severity=Severity.SEVERE,
            red_flags=("thunderclap onset",),
        ),
    ),
    Case(
        id="chest-typical-angina",
        slug="typical-angina-with-risk-factors",
        title="Typical Angina with Cardiovascular Risk Factors",
        chief_complaint="Exertional chest pressure",
        category=CaseCategory.CHEST_PAIN,
        difficulty=DifficultyLevel.INTERMEDIATE,
        specialty_tags=(SpecialtyTrack.IM, SpecialtyTrack.FM),
        optimal_imaging=("spect-mpi", "xray-chest"),
        explanation=(
            "Stable exertional chest pain with intermediate pretest "
            "probability is evaluated with stress perfusion imaging."
        ),
        clinical_input=ClinicalInput(
            age=62,
            sex=Sex.MALE,
            chief_complaint="Exertional chest pressure",
            duration=Duration.SUBACUTE,
            severity=Severity.MODERATE,
        ),
    ),
    Case(
        id="chest-pe-suspected",
        slug="suspected-pulmonary-embolism",
        title="Pleuritic Chest Pain after Surgery",
        chief_complaint="Sudden dyspnea and pleuritic pain",
        category=CaseCategory.CHEST_PAIN,
        difficulty=DifficultyLevel.ADVANCED,
        specialty_tags=(SpecialtyTrack.EM, SpecialtyTrack.SURGERY),
        optimal_imaging=("cta-chest",),
        explanation=(
            "High pretest probability of pulmonary embolism is evaluated "
            "with CT pulmonary angiography."
        ),
        clinical_input=ClinicalInput(
            age=58,
            sex=Sex.FEMALE,
            chief_complaint="Sudden dyspnea and pleuritic pain",
            duration=Duration.ACUTE,
            severity=Severity.SEVERE,
            red_flags=("tachycardia", "hypoxia", "recent surgery"),
        ),
    ),
    Case(
        id="abdomen-ruq-pain",
        slug="right-upper-quadrant-pain",
        title="Right Upper Quadrant Pain",
        chief_complaint="Postprandial RUQ pain and fever",
        category=CaseCategory.ABDOMINAL_PAIN,
        difficulty=DifficultyLevel.BEGINNER,
        specialty_tags=(SpecialtyTrack.EM, SpecialtyTrack.SURGERY),
        optimal_imaging=("us-ruq",),
        explanation="Suspected acute cholecystitis is first evaluated with ultrasound.",
        clinical_input=ClinicalInput(
            age=45,
            sex=Sex.FEMALE,
            chief_complaint="Postprandial RUQ pain and fever",
            duration=Duration.ACUTE,
            severity=Severity.MODERATE,
            red_flags=("fever",),
        ),
    ),
    Case(
        id="trauma-ankle-inversion",
        slug="ankle-inversion-injury",
        title="Ankle Inversion Injury",
        chief_complaint="Twisted ankle, unable to bear weight",
        category=CaseCategory.EXTREMITY_TRAUMA,
        difficulty=DifficultyLevel.BEGINNER,
        specialty_tags=(SpecialtyTrack.EM, SpecialtyTrack.PEDS),
        optimal_imaging=("xray-ankle",),
        explanation=(
            "Inability to bear weight meets the Ottawa ankle rules for "
            "radiography."
        ),
        clinical_input=ClinicalInput(
            age=16,
            sex=Sex.MALE,
            chief_complaint="Twisted ankle, unable to bear weight",
            duration=Duration.ACUTE,
            severity=Severity.MODERATE,
            recent_trauma=True,
        ),
    ),
]
